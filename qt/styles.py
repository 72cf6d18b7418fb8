THEMES = {
    "light": {
        "bg_root": "#f4f1ea",
        "bg_page": "#fffdf8",
        "border": "#d8d2c4",
        "text_main": "#2b2b2b",
        "text_muted": "#7a746a",
        "accent": "#8b5e34",
    },
    "dark": {
        "bg_root": "#1f232a",
        "bg_page": "#242a33",
        "border": "#3f4a5a",
        "text_main": "#e6ebf2",
        "text_muted": "#aeb7c3",
        "accent": "#2CC985",
    },
    "sepia": {
        "bg_root": "#efe3c8",
        "bg_page": "#f7ecd4",
        "border": "#d3c19b",
        "text_main": "#4a3b2a",
        "text_muted": "#8a7456",
        "accent": "#a0522d",
    },
}

FONT_FAMILIES = {
    "georgia": "Georgia, serif",
    "times": '"Times New Roman", Times, serif',
    "arial": "Arial, sans-serif",
    "helvetica": "Helvetica, Arial, sans-serif",
}

QSS = """
QWidget#ReaderRoot {
  background: __BG_ROOT__;
}

QLabel {
  background: transparent;
  color: __TEXT_MUTED__;
}

QLabel#BookTitle {
  color: __TEXT_MAIN__;
  font-size: 16px;
  font-weight: bold;
}

QTextBrowser#PageView {
  background: __BG_PAGE__;
  color: __TEXT_MAIN__;
  border: 1px solid __BORDER__;
  border-radius: 10px;
  padding: 18px;
}

QTextBrowser#PageView[turning="true"] {
  border: 1px solid __ACCENT__;
}

QProgressBar#ReadingProgress {
  background: __BG_PAGE__;
  border: 1px solid __BORDER__;
  border-radius: 4px;
  max-height: 8px;
}

QProgressBar#ReadingProgress::chunk {
  background: __ACCENT__;
  border-radius: 4px;
}
"""


def theme_colors(theme: str) -> dict:
    return THEMES.get(theme, THEMES["light"])


def font_stack(family: str) -> str:
    return FONT_FAMILIES.get(family, FONT_FAMILIES["georgia"])


def build_qss(theme: str = "light") -> str:
    selected = theme_colors(theme)
    qss = QSS
    replacements = {
        "__BG_ROOT__": selected["bg_root"],
        "__BG_PAGE__": selected["bg_page"],
        "__BORDER__": selected["border"],
        "__TEXT_MAIN__": selected["text_main"],
        "__TEXT_MUTED__": selected["text_muted"],
        "__ACCENT__": selected["accent"],
    }
    for source, target in replacements.items():
        qss = qss.replace(source, target)
    return qss


def page_document_css(family: str, size: int, line_height: float) -> str:
    # QTextDocument only understands a small CSS subset; keep it to p rules.
    return (
        f"p {{ font-family: {font_stack(family)}; font-size: {int(size)}px;"
        f" line-height: {int(round(float(line_height) * 100))}%; margin: 0 0 12px 0; }}"
    )
