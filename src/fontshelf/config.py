"""Constants and configuration for fontshelf."""

# Font container formats picked up by scans and the watcher
FONT_EXTENSIONS = frozenset({".ttf", ".otf", ".ttc", ".otc", ".woff", ".woff2"})

# Database file created under click.get_app_dir("fontshelf")
APP_NAME = "fontshelf"
DB_FILENAME = "fonts.db"
DB_ENVVAR = "FONTSHELF_DB"

# Record defaults
DEFAULT_WEIGHT = 400
WEIGHT_MIN = 1
WEIGHT_MAX = 900
DEFAULT_WIDTH = 5  # OS/2 usWidthClass "Medium (normal)"

# Scanning
DEFAULT_WORKERS = 4
QUEUE_SIZE_PER_WORKER = 16
HASH_CHUNK_SIZE = 64 * 1024

# Watcher: events deeper than this below a root are ignored
DEFAULT_WATCH_DEPTH = 2

# License/commercial qualifiers stripped from the end of family names.
# Design descriptors (Condensed, Nord, Extended...) are distinct typefaces and never listed here.
LICENSE_SUFFIXES = (
    "Unlicensed Trial",
    "Personal Use Only",
    "Personal Use",
    "Unlicensed",
    "Trial",
    "Demo",
    "Free",
)

# Weight/style words, only stripped under FamilyPolicy.STYLE_WORDS
STYLE_SUFFIXES = (
    "Extra Bold",
    "ExtraBold",
    "Semi Bold",
    "SemiBold",
    "Extra Light",
    "ExtraLight",
    "Regular",
    "Italic",
    "Oblique",
    "Medium",
    "Normal",
    "Black",
    "Light",
    "Heavy",
    "Thin",
    "Bold",
    "Book",
)

MONOSPACE_TERMS = ("mono", "code", "console", "terminal", "programming", "pixel")

# Categorizer keyword tables, checked in the order they appear in categorizer.categorize
HANDWRITING_KEYWORDS = ("handwriting", "handwritten", "hand drawn", "marker", "chalk")
CURSIVE_KEYWORDS = ("script", "cursive", "brush", "calligraph", "signature")
BLACKLETTER_KEYWORDS = ("blackletter", "fraktur", "textura", "old english", "schwabacher")
STENCIL_KEYWORDS = ("stencil",)
DISPLAY_KEYWORDS = ("display", "decorative", "ornament", "poster", "outline")
SLAB_KEYWORDS = ("slab", "egyptian", "rockwell", "clarendon")
OLD_STYLE_KEYWORDS = ("old style", "oldstyle", "garamond", "caslon", "bembo", "jenson")
DIDONE_KEYWORDS = ("didot", "bodoni", "didone")
SANS_KEYWORDS = (
    "sans",
    "gothic",
    "grotesque",
    "grotesk",
    "helvetica",
    "arial",
    "futura",
    "geometric",
    "humanist",
)
GEOMETRIC_KEYWORDS = ("geometric", "futura", "avant")
HUMANIST_KEYWORDS = ("humanist", "gill", "optima")
GROTESQUE_KEYWORDS = ("grotesque", "grotesk", "akzidenz", "franklin")

# Fixed taxonomy: category -> subcategories
TAXONOMY: dict[str, tuple[str, ...]] = {
    "Monospace": ("Code",),
    "Cursive": ("Script", "Handwriting"),
    "Display": ("Blackletter", "Stencil", "Decorative"),
    "Serif": ("Slab Serif", "Old Style", "Didone", "Transitional"),
    "Sans Serif": ("Geometric", "Humanist", "Grotesque", "Neo-Grotesque"),
}

# Variant ordering for FontStore.list_variants: substring -> rank
VARIANT_ORDER = ("Regular", "Normal", "Medium", "Bold", "Italic")
