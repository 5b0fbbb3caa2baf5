"""PR type classification from title prefixes, and the PR type verification check."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from prverify_core.errors import VerificationFailure
from prverify_core.verifier import VerifyFn

if TYPE_CHECKING:
    from prverify_core.events import PullRequest

DEFAULT_DOCS_URL = "https://sigs.k8s.io/kubebuilder-release-tools/VERSIONING.md"

# Some systems (macOS, mostly) append this to emoji.
_VARIATION_SELECTOR = "\ufe0f"


class PRType(Enum):
    # value: (label, emoji, shortcode, description)
    UNCATEGORIZED = ("uncategorized", "", "", "")
    BREAKING = ("breaking", "⚠", ":warning:", "Breaking change")
    FEATURE = ("feature", "✨", ":sparkles:", "Non-breaking feature")
    BUGFIX = ("bugfix", "🐛", ":bug:", "Patch fix")
    DOCS = ("docs", "📖", ":book:", "Docs")
    INFRA = ("infra", "🌱", ":seedling:", "Infra/Tests/Other")

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def emoji(self) -> str:
        return self.value[1]

    @property
    def shortcode(self) -> str:
        return self.value[2]

    @property
    def description(self) -> str:
        return self.value[3]

    def __str__(self) -> str:
        return self.label


CATEGORIZED = [t for t in PRType if t is not PRType.UNCATEGORIZED]


def pr_type_from_title(title: str) -> tuple[PRType, str]:
    """Return the PR type indicated by the title prefix and the title without it.

    Accepts either the emoji or its ``:shortcode:`` form. Titles without a
    recognised prefix are UNCATEGORIZED and come back stripped but otherwise intact.
    """
    title = title.strip()
    if not title:
        return PRType.UNCATEGORIZED, title

    for pr_type in CATEGORIZED:
        for prefix in (pr_type.shortcode, pr_type.emoji):
            if title.startswith(prefix):
                rest = title[len(prefix) :]
                if rest.startswith(_VARIATION_SELECTOR):
                    rest = rest[len(_VARIATION_SELECTOR) :]
                return pr_type, rest.strip()

    return PRType.UNCATEGORIZED, title


class PRTitleTypeError(VerificationFailure):
    def __init__(self, title: str, docs_url: str = DEFAULT_DOCS_URL):
        self.title = title
        self.docs_url = docs_url
        super().__init__("no matching PR type indicator found in title")

    @property
    def help(self) -> str:
        prefixes = "\n".join(f"- {t.description}: {t.emoji} (`{t.shortcode}`)" for t in CATEGORIZED)
        return (
            f"I saw a title of `{self.title}`, which doesn't seem to have any of the acceptable prefixes.\n"
            "\n"
            "You need to have one of these as the prefix of your PR title:\n"
            "\n"
            f"{prefixes}\n"
            "\n"
            f"More details can be found at [{self.docs_url}]({self.docs_url})."
        )


def make_pr_type_verifier(docs_url: str = DEFAULT_DOCS_URL) -> VerifyFn:
    """Build a verification function that requires a PR type prefix in the title."""

    def verify_pr_type(pr: PullRequest) -> str:
        pr_type, final_title = pr_type_from_title(pr.title)
        if pr_type is PRType.UNCATEGORIZED:
            raise PRTitleTypeError(pr.title, docs_url)
        return f"Found {pr_type.emoji} PR ({pr_type}) with final title:\n\n\t{final_title}\n"

    return verify_pr_type


verify_pr_type = make_pr_type_verifier()
