"""
Candidate locator generation from a field label and type
"""
from dataclasses import dataclass

from autofill.models import FieldType

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWER = "abcdefghijklmnopqrstuvwxyz"

TEXT_INPUT = (
    'self::input[not(@type) or @type="text" or @type="email" or @type="tel" '
    'or @type="number" or @type="url" or @type="search" or @type="password"]'
)
DATE_LIKE = (
    f'contains(translate(@placeholder,"{UPPER}","{LOWER}"),"dd") '
    f'or contains(translate(@placeholder,"{UPPER}","{LOWER}"),"yy") '
    f'or contains(translate(@placeholder,"{UPPER}","{LOWER}"),"date") '
    f'or contains(translate(@id,"{UPPER}","{LOWER}"),"date")'
)

# Element predicates per field type, most specific first.
TYPE_TARGETS = {
    FieldType.TEXT: [TEXT_INPUT],
    FieldType.TEXTAREA: ["self::textarea"],
    FieldType.DATE: [
        f'self::input[@type="date" or ((not(@type) or @type="text" or @role="combobox") and ({DATE_LIKE}))]',
        TEXT_INPUT,
    ],
    FieldType.RADIO: ['self::input[@type="radio"] or @role="radio"'],
    FieldType.CHECKBOX: ['self::input[@type="checkbox"] or @role="checkbox"'],
    FieldType.SELECT: ['self::select or @role="listbox"'],
    FieldType.BUTTON: [
        'self::button or self::input[@type="submit" or @type="button"] or @role="button"'
    ],
}

LABEL_CONTAINERS = ["span", "div", "td", "label"]

OPTION_PLACEHOLDER = "OPTION_VALUE"


def xpath_literal(text):
    """Quote text as an XPath 1.0 string literal."""
    text = str(text)
    if '"' not in text:
        return f'"{text}"'
    if "'" not in text:
        return f"'{text}'"
    pieces = text.split('"')
    return "concat(" + ", '\"', ".join(f'"{p}"' for p in pieces) + ")"


@dataclass(frozen=True)
class LocatorCandidate:
    expression: str
    kind: str = "xpath"
    tier: str = "label"

    @property
    def selector(self):
        """Selector string in Playwright's engine-prefixed syntax."""
        return f"{self.kind}={self.expression}"

    @classmethod
    def from_override(cls, selector):
        selector = selector.strip()
        kind = "xpath" if selector.startswith(("/", "(")) else "css"
        return cls(selector, kind=kind, tier="override")


class SelectorCascade:
    @staticmethod
    def generate(name, field_type=FieldType.TEXT, selector=None, value=None):
        """
        All candidate locators for a field, most specific first:
        explicit override, label-precedes-control, direct attributes,
        platform question containers.
        """
        field_type = FieldType.parse(field_type)
        candidates = []

        if selector:
            if field_type == FieldType.RADIO and OPTION_PLACEHOLDER in selector and value:
                selector = selector.replace(OPTION_PLACEHOLDER, str(value))
            candidates.append(LocatorCandidate.from_override(selector))

        name = (name or "").strip()
        if not name:
            return candidates

        lit = xpath_literal(name)
        lower_lit = xpath_literal(name.lower())

        for target in TYPE_TARGETS[field_type]:
            candidates.extend(SelectorCascade._label_patterns(lit, target))
        for target in TYPE_TARGETS[field_type]:
            candidates.extend(SelectorCascade._attribute_patterns(lit, lower_lit, target, name))
        for target in TYPE_TARGETS[field_type]:
            candidates.extend(SelectorCascade._platform_patterns(lit, target))
        return candidates

    @staticmethod
    def _label_patterns(lit, target):
        patterns = [
            f"//{tag}[contains(normalize-space(text()),{lit})]/following::*[{target}][1]"
            for tag in LABEL_CONTAINERS
        ]
        patterns += [
            f"//label[normalize-space(text())={lit}]/following-sibling::*[{target}][1]",
            f"//label[normalize-space(text())={lit}]/following::*[{target}][1]",
            f"//*[{target}][@id=//label[contains(normalize-space(.),{lit})]/@for]",
        ]
        return [LocatorCandidate(p, tier="label") for p in patterns]

    @staticmethod
    def _attribute_patterns(lit, lower_lit, target, name):
        patterns = [
            f"//*[{target}][@name={lit}]",
            f"//*[{target}][@id={lit}]",
            f"//*[{target}][@placeholder={lit}]",
            f"//*[{target}][@aria-label={lit}]",
        ]
        if name.lower() != name:
            patterns += [
                f"//*[{target}][@name={lower_lit}]",
                f"//*[{target}][@id={lower_lit}]",
            ]
        patterns.append(f"//*[{target}][contains(@placeholder,{lit})]")
        return [LocatorCandidate(p, tier="attribute") for p in patterns]

    @staticmethod
    def _platform_patterns(lit, target):
        patterns = [
            f'//span[normalize-space(text())={lit}]/ancestor::div[contains(@data-automation-id,"questionItem")][1]//*[{target}]',
            f'//div[@role="listitem"][.//*[normalize-space(text())={lit}]]//*[{target}]',
        ]
        return [LocatorCandidate(p, tier="platform") for p in patterns]
