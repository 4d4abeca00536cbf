import os

FETCH_TIMEOUT = float(os.environ.get("SEO_SCANNER_FETCH_TIMEOUT", "10"))

USER_AGENT = "SEOMonitor-Scanner/1.0 (+https://github.com/seo-monitor; technical-audit)"
ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 70
DESCRIPTION_MIN_LENGTH = 70
DESCRIPTION_MAX_LENGTH = 170

# Response time bands (ms)
RESPONSE_TIME_OK_MS = 1500
RESPONSE_TIME_SLOW_MS = 3000
RESPONSE_TIME_CRITICAL_MS = 5000

THIN_CONTENT_WORDS = 100
LOW_CONTENT_WORDS = 300

MISSING_ALT_HIGH_THRESHOLD = 5

REDIRECT_STATUSES = (301, 302, 308)

AI_CRAWLERS = (
    "gptbot",
    "chatgpt-user",
    "claudebot",
    "claude-web",
    "perplexitybot",
    "google-extended",
)

SEVERITY_WEIGHTS = {
    "critical": 15,
    "high": 10,
    "medium": 5,
    "low": 2,
    "info": 0,
}

SEVERITY_ORDER = ("critical", "high", "medium", "low", "info")

# One entry per check in the battery, passed or not
CHECKS = (
    "ssl",
    "http-redirect",
    "response-time",
    "http-status",
    "robots-txt",
    "sitemap-xml",
    "meta-title",
    "meta-description",
    "viewport",
    "open-graph",
    "canonical",
    "h1-heading",
    "structured-data",
    "content-length",
    "image-alts",
    "internal-links",
    "favicon",
    "llms-txt",
)
TOTAL_CHECKS = len(CHECKS)

AUDIT_TYPE = "technical-seo"
AGENT_TYPE = "audit-runner"

CRON_SECRET = os.environ.get("SEO_SCANNER_CRON_SECRET", "")
DB_PATH = os.environ.get("SEO_SCANNER_DB_PATH", "seo_scanner.db")
LOG_LEVEL = os.environ.get("SEO_SCANNER_LOG_LEVEL", "INFO")
