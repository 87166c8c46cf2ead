"""Internal constants shared across the library."""

CATALOG_URL = "https://mc-api.marketcheck.com/v2/car/dealer/inventory/active"
DIRECTORY_TABLE = "dealer_site"
USER_AGENT = "lotfinder/0 (+aiohttp)"

# ------------------------------------------------------------------
# Catalog aggregation
# ------------------------------------------------------------------

#: Rows requested per catalog call.
CATALOG_PAGE_SIZE = 50
#: Hard ceiling on catalog calls per aggregation run (~500 listings).
MAX_CATALOG_PAGES = 10
#: Pause before every catalog call after the first, in seconds.
CATALOG_PAGE_DELAY = 0.25

# ------------------------------------------------------------------
# Dealer lookup
# ------------------------------------------------------------------

SUGGESTION_LIMIT = 10
SUGGESTION_QUIET_PERIOD = 0.3
STATUS_SETTLE_DELAY = 0.3

# ------------------------------------------------------------------
# Result presentation
# ------------------------------------------------------------------

RESULTS_PER_PAGE = 21
#: Flat term used for the estimated monthly payment.
PAYMENT_TERM_MONTHS = 60

#: Canonical body-type categories offered as filter options.
ALLOWED_BODY_TYPES: tuple[str, ...] = (
    "Truck",
    "Hatchback",
    "Wagon",
    "SUV/Crossover",
    "Coupe",
    "Van/Minivan",
    "Sedan",
    "Convertible",
)

#: Mileage ceilings offered as filter options.
MILEAGE_OPTIONS: tuple[int, ...] = tuple(range(10_000, 100_001, 10_000))

EXCLUDED_TRIM = "other"

#: Session error text for failures outside the classified error kinds.
UNEXPECTED_SEARCH_ERROR = "An unexpected error occurred during the search."
