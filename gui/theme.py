"""Dark theme stylesheet for the jellyrename GUI."""

# Color palette
COLORS = {
    "background": "#101418",
    "panel": "#1A2028",
    "border": "#2A323C",
    "accent": "#AA5CC3",
    "accent_hover": "#BB6FD4",
    "accent_alt": "#00A4DC",
    "text": "#E6E9ED",
    "text_muted": "#8C96A3",
    "text_disabled": "#5A636E",
    "success": "#4CAF50",
    "warning": "#FFB300",
    "error": "#EF5350",
    "selection": "rgba(170, 92, 195, 0.3)",
}

# Table colors per rename status
STATUS_COLORS = {
    "pending": COLORS["text"],
    "planned": COLORS["accent_alt"],
    "renamed": COLORS["success"],
    "review": COLORS["warning"],
    "skipped": COLORS["text_muted"],
    "error": COLORS["error"],
}

DARK_STYLESHEET = f"""
QMainWindow, QWidget {{
    background-color: {COLORS["background"]};
    color: {COLORS["text"]};
    font-size: 12pt;
}}

QGroupBox {{
    background-color: {COLORS["panel"]};
    border: 1px solid {COLORS["border"]};
    border-radius: 6px;
    margin-top: 10px;
    padding: 10px;
    padding-top: 20px;
}}

QGroupBox::title {{
    subcontrol-origin: margin;
    padding: 2px 6px;
    color: {COLORS["text_muted"]};
}}

QPushButton {{
    background-color: {COLORS["panel"]};
    border: 1px solid {COLORS["border"]};
    border-radius: 5px;
    padding: 6px 14px;
}}

QPushButton:hover {{
    border-color: {COLORS["accent"]};
}}

QPushButton:disabled {{
    color: {COLORS["text_disabled"]};
}}

QPushButton#primaryButton {{
    background-color: {COLORS["accent"]};
    border: none;
    color: white;
    font-weight: bold;
}}

QPushButton#primaryButton:hover {{
    background-color: {COLORS["accent_hover"]};
}}

QPushButton#primaryButton:disabled {{
    background-color: {COLORS["border"]};
    color: {COLORS["text_disabled"]};
}}

QLineEdit, QComboBox, QTextEdit {{
    background-color: {COLORS["panel"]};
    border: 1px solid {COLORS["border"]};
    border-radius: 4px;
    padding: 4px 6px;
}}

QTableWidget {{
    background-color: {COLORS["panel"]};
    alternate-background-color: {COLORS["background"]};
    gridline-color: {COLORS["border"]};
    selection-background-color: {COLORS["selection"]};
}}

QHeaderView::section {{
    background-color: {COLORS["background"]};
    color: {COLORS["text_muted"]};
    border: none;
    border-bottom: 1px solid {COLORS["border"]};
    padding: 4px;
}}

QProgressBar {{
    background-color: {COLORS["panel"]};
    border: none;
    border-radius: 3px;
}}

QProgressBar::chunk {{
    background-color: {COLORS["accent_alt"]};
    border-radius: 3px;
}}

QLabel#mutedLabel {{
    color: {COLORS["text_muted"]};
}}
"""
