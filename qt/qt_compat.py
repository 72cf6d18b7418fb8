"""
Qt compatibility layer:
- MINDFUL_QT_API=pyqt6 / pyside6 pins a binding
- auto tries PyQt6, then PySide6
"""

import os

QT_API = None
_requested = os.getenv("MINDFUL_QT_API", "auto").strip().lower()

if _requested in {"pyqt6", "pyqt"}:
    from PyQt6 import QtCore, QtWidgets, QtGui  # type: ignore

    Signal = QtCore.pyqtSignal
    Slot = QtCore.pyqtSlot
    QT_API = "PyQt6"
elif _requested in {"pyside6", "pyside"}:
    from PySide6 import QtCore, QtWidgets, QtGui  # type: ignore

    Signal = QtCore.Signal
    Slot = QtCore.Slot
    QT_API = "PySide6"
else:
    try:
        from PyQt6 import QtCore, QtWidgets, QtGui  # type: ignore

        Signal = QtCore.pyqtSignal
        Slot = QtCore.pyqtSlot
        QT_API = "PyQt6"
    except ImportError:  # pragma: no cover
        from PySide6 import QtCore, QtWidgets, QtGui  # type: ignore

        Signal = QtCore.Signal
        Slot = QtCore.Slot
        QT_API = "PySide6"
