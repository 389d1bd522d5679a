"""
Detect fillable fields on the current page as empty FieldSpecs
"""
import logging

from autofill.models import FieldSpec, FieldType

logger = logging.getLogger(__name__)

# Collects label, type and a reusable selector for each visible, editable control.
DETECT_JS = """() => {
    const textNorm = (s) => (s || '').replace(/\\s+/g, ' ').trim();
    const isUsable = (el) => {
        const style = window.getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        return (el.type || '').toLowerCase() !== 'hidden' &&
            style.display !== 'none' && style.visibility !== 'hidden' &&
            !el.disabled && !el.readOnly && rect.width > 0 && rect.height > 0;
    };
    const findLabel = (el) => {
        if (el.id) {
            const l = document.querySelector(`label[for="${CSS.escape(el.id)}"]`);
            if (l) return textNorm(l.textContent);
        }
        const parent = el.closest('label');
        if (parent) return textNorm(parent.textContent);
        const prev = el.previousElementSibling;
        if (prev && (prev.tagName === 'LABEL' || prev.tagName === 'SPAN')) {
            return textNorm(prev.textContent);
        }
        return el.getAttribute('aria-label') || '';
    };
    const selectorFor = (el) => {
        if (el.id) return `#${CSS.escape(el.id)}`;
        if (el.name) return `[name="${CSS.escape(el.name)}"]`;
        const cls = (el.getAttribute('class') || '').trim().split(/\\s+/)[0];
        if (cls) return `.${CSS.escape(cls)}`;
        const tag = el.tagName.toLowerCase();
        const parent = el.parentElement;
        if (!parent) return tag;
        const siblings = Array.from(parent.children).filter(s => s.tagName === el.tagName);
        return `${tag}:nth-of-type(${siblings.indexOf(el) + 1})`;
    };
    return Array.from(document.querySelectorAll('input, textarea, select'))
        .filter(isUsable)
        .map((el, index) => ({
            index: index,
            tag: el.tagName.toLowerCase(),
            type: (el.getAttribute('type') || '').toLowerCase(),
            label: findLabel(el),
            name: el.name || '',
            id: el.id || '',
            selector: selectorFor(el),
            required: el.required || el.hasAttribute('aria-required')
        }));
}"""

INPUT_TYPES = {
    "radio": FieldType.RADIO,
    "checkbox": FieldType.CHECKBOX,
    "date": FieldType.DATE,
    "submit": FieldType.BUTTON,
    "button": FieldType.BUTTON,
}


def field_type_for(tag, input_type):
    if tag == "textarea":
        return FieldType.TEXTAREA
    if tag == "select":
        return FieldType.SELECT
    return INPUT_TYPES.get(input_type, FieldType.TEXT)


class FieldDetector:
    def __init__(self, page):
        self.page = page

    def detect(self):
        """FieldSpecs (empty values) for every visible, editable control on the page."""
        try:
            raw_fields = self.page.evaluate(DETECT_JS)
        except Exception as e:
            logger.warning(f"Field detection failed: {e}")
            return []

        fields = []
        for raw in raw_fields:
            name = raw.get("label") or raw.get("name") or raw.get("id") or f"Field {raw['index'] + 1}"
            fields.append(FieldSpec(
                name=name,
                type=field_type_for(raw.get("tag"), raw.get("type")),
                value="",
                selector=raw.get("selector"),
                required=bool(raw.get("required")),
            ))
        logger.info(f"Detected {len(fields)} fields: {', '.join(f.name for f in fields)}")
        return fields
