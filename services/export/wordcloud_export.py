"""
Word Cloud Export
Renders one frequency-colored word cloud per group
"""

import re
from collections import Counter
from pathlib import Path
from typing import Iterable

import structlog
from wordcloud import STOPWORDS, WordCloud

from shared import config

logger = structlog.get_logger()

# Terms that say nothing about a response's theme. Matching is by exact
# literal, so each term carries its case variants.
DOMAIN_EXCLUDE_WORDS = (
    # Brand and corporate references
    "Dell", "dell", "DELL",
    "DellEMC", "dellemc", "DELLEMC",
    "DellEMC2", "dellemc2", "DELLEMC2",
    "DellTechnologies", "delltechnologies", "DELLTECHNOLOGIES",
    "DellTech", "delltech", "DELLTECH",
    "Alienware", "alienware", "ALIENWARE",
    "HPE", "hpe", "Hpe",
    "HewlettPackardEnterprise", "hewlettpackardenterprise", "HEWLETTPACKARDENTERPRISE",
    "HP", "hp", "Hp",
    "Lenovo", "lenovo", "LENOVO",
    "IBM", "ibm", "Ibm",
    "Apple", "apple", "APPLE",
    "Acer", "acer", "ACER",
    "Asus", "asus", "ASUS",
    "Microsoft", "microsoft", "MICROSOFT",
    "Intel", "intel", "INTEL",
    "AMD", "amd", "Amd",
    "Nvidia", "nvidia", "NVIDIA",
    "VMware", "vmware", "VMWARE",
    "Cisco", "cisco", "CISCO",
    "Oracle", "oracle", "ORACLE",
    # Product lines
    "EMC", "emc", "Emc",
    "Inspiron", "inspiron", "INSPIRON",
    "Latitude", "latitude", "LATITUDE",
    "Precision", "precision", "PRECISION",
    "OptiPlex", "optiplex", "OPTIPLEX",
    "XPS", "xps", "Xps",
    "Vostro", "vostro", "VOSTRO",
    "Wyse", "wyse", "WYSE",
    "PowerEdge", "poweredge", "POWEREDGE",
    "PowerVault", "powervault", "POWERVAULT",
    "EqualLogic", "equallogic", "EQUALLOGIC",
    "Compellent", "compellent", "COMPELLENT",
    # General tech references
    "Tech", "tech", "TECH",
    "Technologies", "technologies", "TECHNOLOGIES",
    "Technology", "technology", "TECHNOLOGY",
    "InfoTech", "infotech", "INFOTECH",
    "IT", "it", "It",
    # Survey meta terms
    "Survey", "survey", "SURVEY",
    "Questionnaire", "questionnaire", "QUESTIONNAIRE",
    "Respondent", "respondent", "RESPONDENT",
    "Response", "response", "RESPONSE",
    "Feedback", "feedback", "FEEDBACK",
    "N/A", "n/a",
    "NA", "na", "Na",
    "None", "none", "NONE",
    "Nothing", "nothing", "NOTHING",
    "NotApplicable", "notapplicable", "NOTAPPLICABLE",
    "Comment", "comment", "COMMENT",
    "Form", "form", "FORM",
    "Please", "please", "PLEASE",
    "Thank", "thank", "THANK",
    "Thanks", "thanks", "THANKS",
    "Reviewer", "reviewer", "REVIEWER",
    "User", "user", "USER",
    # Placeholders and identifiers
    "Q1", "q1",
    "Q2", "q2",
    "Q3", "q3",
    "Q4", "q4",
    "Q5", "q5",
    "ID", "id", "Id",
    "TicketNumber", "ticketnumber", "TICKETNUMBER",
    "CaseNumber", "casenumber", "CASENUMBER",
    "RefNumber", "refnumber", "REFNUMBER",
)

EXCLUDE_WORDS = frozenset(STOPWORDS) | frozenset(DOMAIN_EXCLUDE_WORDS)

HUE = 200
LIGHTNESS = 0.5

# (lowest whole percent, saturation); None means "use the frequency itself"
SATURATION_BUCKETS = (
    (90, None),
    (20, 1.0),
    (10, 0.8),
    (6, 0.6),
    (3, 0.3),
)
DEFAULT_SATURATION = 0.2

_SLUG_SEPARATORS = re.compile(r"[\s/\\]")


def saturation_for(frequency: float) -> float:
    """Map a normalized frequency in [0, 1] to a saturation"""
    percent = int(frequency * 100)
    for floor, saturation in SATURATION_BUCKETS:
        if percent >= floor:
            return frequency if saturation is None else saturation
    return DEFAULT_SATURATION


def word_frequencies(
    corpus: str,
    max_words: int = config.MAX_WORDS,
    exclude: frozenset = EXCLUDE_WORDS,
) -> dict[str, float]:
    """
    Count whitespace-delimited tokens and normalize by the top count.

    Only the first max_words tokens are counted. Tokens found in exclude
    are dropped before normalizing.
    """
    tokens = corpus.split()[:max_words]
    counts = Counter(token for token in tokens if token not in exclude)
    if not counts:
        return {}
    top = max(counts.values())
    return {token: count / top for token, count in counts.items()}


def slugify(key: str) -> str:
    return _SLUG_SEPARATORS.sub("_", key.lower())


def unique_slugs(keys: Iterable[str]) -> dict[str, str]:
    """
    Slug every key, suffixing repeats with _2, _3, ... in the given order.
    """
    slugs: dict[str, str] = {}
    taken: set[str] = set()
    for key in keys:
        base = slugify(key)
        slug = base
        n = 2
        while slug in taken:
            slug = f"{base}_{n}"
            n += 1
        if slug != base:
            logger.warning("Slug collision, renaming artifact", key=key, slug=slug)
        taken.add(slug)
        slugs[key] = slug
    return slugs


class FrequencyColor:
    """wordcloud color_func that colors words by normalized frequency"""

    def __init__(self, frequencies: dict[str, float]):
        self.frequencies = frequencies

    def __call__(self, word, font_size=None, position=None, orientation=None,
                 random_state=None, **kwargs) -> str:
        saturation = saturation_for(self.frequencies.get(word, 0.0))
        return f"hsl({HUE}, {round(saturation * 100)}%, {round(LIGHTNESS * 100)}%)"


class WordCloudRenderer:
    """Renders group corpora to PNG word clouds with a fixed layout seed."""

    def __init__(
        self,
        width: int = config.CLOUD_WIDTH,
        height: int = config.CLOUD_HEIGHT,
        seed: int = config.CLOUD_SEED,
        max_words: int = config.MAX_WORDS,
        placements: int = 200,
        exclude: frozenset = EXCLUDE_WORDS,
        background_color: str = "black",
    ):
        self.width = width
        self.height = height
        self.seed = seed
        self.max_words = max_words
        self.placements = placements
        self.exclude = exclude
        self.background_color = background_color

    def render(self, corpus: str) -> WordCloud:
        """
        Lay out a word cloud for one corpus.

        Raises:
            ValueError: if no token survives the exclusion filter
        """
        frequencies = word_frequencies(corpus, self.max_words, self.exclude)
        if not frequencies:
            raise ValueError("no words left after filtering")

        cloud = WordCloud(
            width=self.width,
            height=self.height,
            random_state=self.seed,
            repeat=True,
            max_words=max(self.placements, len(frequencies)),
            stopwords=set(),
            background_color=self.background_color,
            color_func=FrequencyColor(frequencies),
        )
        return cloud.generate_from_frequencies(frequencies)

    def write(self, corpus: str, path: Path) -> Path:
        cloud = self.render(corpus)
        cloud.to_file(str(path))
        logger.debug("Wrote word cloud", path=str(path))
        return path
