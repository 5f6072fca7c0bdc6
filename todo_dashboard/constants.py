APP_TITLE = "DYI Series - Analog Card"
APP_TAGLINE = "Where did my time go? 😳"

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

TOTAL_DAYS = 10
DAYS_BEFORE = 5
TOTAL_ROWS = 10

COMPLETED_MARK = "✓"

CARD_STYLE_LINE = "line"
CARD_STYLE_TEXTAREA = "textarea"
CARD_STYLES = [CARD_STYLE_LINE, CARD_STYLE_TEXTAREA]
CARD_STYLE_LABELS = {
    CARD_STYLE_LINE: "Lines",
    CARD_STYLE_TEXTAREA: "Text block",
}
