import argparse
import logging
import os
import sys

from system.reader_settings import debug_enabled

log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Mindful Reader (Qt)")
    parser.add_argument(
        "file",
        nargs="?",
        help="Document to open on startup.",
    )
    parser.add_argument(
        "--library",
        default=None,
        help="Library directory (defaults to $MINDFUL_LIBRARY_DIR or ./library).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def configure_logging(debug=False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def prepare_qt_runtime():
    # Prevent loading Qt plugins from conda/system locations.
    for key in (
        "QT_PLUGIN_PATH",
        "QML2_IMPORT_PATH",
        "QT_QPA_PLATFORM_PLUGIN_PATH",
    ):
        os.environ.pop(key, None)


def build_engine(library_dir=None, parent=None):
    from adapters.json_library_store import JsonLibraryStore
    from core.engine import ReaderEngine
    from qt.qt_scheduler import QtScheduler

    engine = ReaderEngine(JsonLibraryStore(library_dir), QtScheduler(parent))
    engine.load_settings()
    return engine


def main(argv=None):
    args = build_parser().parse_args(argv)
    debug = args.debug or debug_enabled()
    configure_logging(debug)
    prepare_qt_runtime()
    from qt.qt_compat import QtWidgets, QT_API
    from qt.reader_window import ReaderWindow

    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("Mindful Reader")
    app.setOrganizationName("Mindful Reader")
    log.debug("Qt backend: %s", QT_API)

    engine = build_engine(args.library, parent=app)
    window = ReaderWindow(engine, debug=debug)
    if args.file:
        window.open_path(args.file)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
