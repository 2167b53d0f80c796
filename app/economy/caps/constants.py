from app.economy.caps.types import OnExhaust

STATUS_LABEL_EXHAUSTED = "Elfogyott"
STATUS_LABEL_CRITICAL = "Majdnem tele"
STATUS_LABEL_WARNING = "Közeledik a limit"
STATUS_LABEL_AVAILABLE = "Elérhető"

FULL_USAGE_PCT = 100.0

DEFAULT_PER_USER_DAILY = 1
DEFAULT_ON_EXHAUST = OnExhaust.CLOSE
