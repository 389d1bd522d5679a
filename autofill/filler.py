"""
Form field filling logic, one routine per field type
"""
import logging
import time

from autofill.cascade import LOWER, UPPER, xpath_literal
from autofill.dates import DateFormat, convert, detect_format
from autofill.models import FieldType
from autofill.resolver import is_interactive
from autofill.text_matcher import FUZZY_MATCH_THRESHOLD, is_fuzzy_match, search_variants

logger = logging.getLogger(__name__)

SET_TEXT_JS = """(el, value) => {
    el.focus();
    try { if (typeof el.select === 'function') el.select(); } catch (e) {}
    const proto = el.tagName === 'TEXTAREA'
        ? window.HTMLTextAreaElement.prototype
        : window.HTMLInputElement.prototype;
    const descriptor = Object.getOwnPropertyDescriptor(proto, 'value');
    if (descriptor && descriptor.set) {
        descriptor.set.call(el, value);
    } else {
        el.value = value;
    }
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    el.dispatchEvent(new Event('blur', { bubbles: true }));
    el.dispatchEvent(new KeyboardEvent('keydown', { key: 'Tab', bubbles: true }));
    el.dispatchEvent(new KeyboardEvent('keyup', { key: 'Tab', bubbles: true }));
    return el.value;
}"""

SET_DATE_JS = """(el, value) => {
    const proto = window.HTMLInputElement.prototype;
    const descriptor = Object.getOwnPropertyDescriptor(proto, 'value');
    const assign = (v) => descriptor && descriptor.set ? descriptor.set.call(el, v) : (el.value = v);
    assign('');
    assign(value);
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return el.value;
}"""

CONFIRM_DATE_JS = """el => {
    const keys = [['Enter', 13], ['Tab', 9]];
    for (const [key, code] of keys) {
        el.dispatchEvent(new KeyboardEvent('keydown', {
            key: key, keyCode: code, which: code, bubbles: true, cancelable: true
        }));
    }
    el.blur();
}"""

DOM_CLICK_JS = "el => { el.focus(); el.click(); }"

DATE_HINT_JS = """el => ({
    type: (el.type || '').toLowerCase(),
    hint: [el.getAttribute('placeholder'), el.getAttribute('aria-label'), el.getAttribute('title')]
        .filter(Boolean).join(' ')
})"""

DATE_PICKER_JS = """el => (
    (el.getAttribute('role') === 'combobox' &&
        (el.getAttribute('placeholder') || '').toLowerCase().includes('date')) ||
    (el.id || '').toLowerCase().includes('datepicker')
)"""

CHECK_RADIO_JS = """el => {
    el.focus();
    el.checked = true;
    for (const type of ['mousedown', 'mouseup', 'click', 'change', 'input']) {
        el.dispatchEvent(new Event(type, { bubbles: true, cancelable: true }));
    }
    el.dispatchEvent(new Event('focus', { bubbles: true }));
    el.dispatchEvent(new Event('blur', { bubbles: true }));
    return el.checked;
}"""

RADIO_CONTROL = "xpath=.//*[self::input[@type='radio'] or @role='radio']"

GROUP_ANCESTORS = [
    "xpath=ancestor::*[@role='radiogroup'][1]",
    "xpath=ancestor::fieldset[1]",
    "xpath=ancestor::form[1]",
    "xpath=..",
]


class FormFiller:
    def __init__(self, page, config=None, sleep=time.sleep):
        self.page = page
        self.config = config
        self.sleep = sleep
        self.fuzzy_threshold = getattr(config, "fuzzy_threshold", FUZZY_MATCH_THRESHOLD)
        self.handlers = {
            FieldType.TEXT: self.fill_text,
            FieldType.TEXTAREA: self.fill_text,
            FieldType.DATE: self.fill_date,
            FieldType.RADIO: self.fill_radio,
            FieldType.BUTTON: self.click_button,
            FieldType.SELECT: self.fill_unsupported,
            FieldType.CHECKBOX: self.fill_unsupported,
        }

    def fill(self, locator, field):
        """
        Fill a resolved element according to the field's type.
        Never raises; any error is reported as False.
        """
        try:
            field_type = field.type
            if field_type == FieldType.TEXT and self._looks_like_date_picker(locator):
                logger.info(f"'{field.name}' looks like a date picker, using date input")
                field_type = FieldType.DATE
            return bool(self.handlers[field_type](locator, field.value))
        except Exception as e:
            logger.warning(f"Failed to fill field '{field.name}': {e}")
            return False

    def fill_text(self, locator, value):
        value = str(value or "")
        try:
            locator.focus(timeout=3000)
            written = locator.evaluate(SET_TEXT_JS, value)
            if written != value:
                logger.debug(f"Page rewrote value '{value}' as '{written}'")
            return True
        except Exception as e:
            logger.warning(f"Error filling text input: {e}")
            return False

    def fill_date(self, locator, value):
        raw = str(value or "").strip()
        formatted = raw
        try:
            info = locator.evaluate(DATE_HINT_JS)
            if info.get("type") == "date":
                target = DateFormat.ISO
            else:
                target = detect_format(info.get("hint", ""))
            formatted = convert(raw, target) or raw
            logger.info(f"Date '{raw}' -> '{formatted}' ({target.value})")

            # Many pickers only switch to free-text entry on the second click.
            locator.evaluate(DOM_CLICK_JS)
            self.sleep(self._pause("date_click_pause"))
            locator.evaluate(DOM_CLICK_JS)
            self.sleep(self._pause("date_input_pause"))

            locator.evaluate(SET_DATE_JS, formatted)
            self.sleep(self._pause("date_confirm_pause"))
            locator.evaluate(CONFIRM_DATE_JS)
            return True
        except Exception as e:
            logger.warning(f"Date input sequence failed, typing value directly: {e}")
            return self.fill_text(locator, formatted)

    def fill_radio(self, locator, value):
        option = str(value or "").strip()
        if not option:
            logger.info("[SKIP] radio field without a value")
            return False

        container = self._radio_group(locator)
        strategies = [
            self._radio_by_label_span,
            self._radio_by_label_text,
            self._radio_by_adjacent_text,
            self._radio_by_value,
        ]
        for i, strategy in enumerate(strategies, start=1):
            try:
                radio = strategy(container, option)
            except Exception as e:
                logger.debug(f"Radio strategy {i} failed: {e}")
                continue
            if radio is not None:
                logger.info(f"Radio option '{option}' found with strategy {i}")
                return self._check_radio(radio)

        logger.warning(f"Could not find radio option '{option}'")
        return False

    def click_button(self, locator, value=None):
        try:
            locator.focus(timeout=3000)
            locator.evaluate("el => el.click()")
        except Exception as e:
            logger.warning(f"Error clicking button: {e}")
            return False
        # The native click may already have navigated away.
        for event in ("mousedown", "mouseup", "click"):
            try:
                locator.dispatch_event(event, timeout=1000)
            except Exception as e:
                logger.debug(f"Synthetic {event} not delivered: {e}")
                break
        return True

    def fill_unsupported(self, locator, value):
        logger.warning("[SKIP] select/checkbox filling is not supported")
        return False

    def _pause(self, name):
        return getattr(self.config, name, 0.1) if self.config is not None else 0.1

    def _looks_like_date_picker(self, locator):
        try:
            return bool(locator.evaluate(DATE_PICKER_JS))
        except Exception:
            return False

    def _radio_group(self, locator):
        """Nearest radiogroup, fieldset or form around the resolved control."""
        for selector in GROUP_ANCESTORS:
            try:
                group = locator.locator(selector).first
                if group.count() > 0:
                    return group
            except Exception:
                continue
        return locator

    def _radio_by_label_span(self, container, option):
        for variant in search_variants(option):
            lit = xpath_literal(variant.lower())
            radio = container.locator(
                f"xpath=.//label[.//span[contains(translate(text(),'{UPPER}','{LOWER}'),{lit})]]"
                f"//input[@type='radio']"
            ).first
            if radio.count() > 0:
                return radio
        return None

    def _radio_by_label_text(self, container, option):
        labels = container.locator("label")
        texts = labels.evaluate_all("els => els.map(e => (e.textContent || '').trim())")
        for i, text in enumerate(texts):
            if not self._matches(text, option):
                continue
            label = labels.nth(i)
            radio = label.locator("input[type='radio']").first
            if radio.count() > 0:
                return radio
            target_id = label.get_attribute("for")
            if target_id:
                radio = self.page.locator(
                    f"xpath=//input[@type='radio'][@id={xpath_literal(target_id)}]"
                ).first
                if radio.count() > 0:
                    return radio
        return None

    def _radio_by_adjacent_text(self, container, option):
        spans = container.locator("span")
        texts = spans.evaluate_all("els => els.map(e => (e.textContent || '').trim())")
        for i, text in enumerate(texts):
            if not self._matches(text, option):
                continue
            radio = spans.nth(i).locator(
                "xpath=ancestor::*[self::label or self::div][1]"
            ).locator(RADIO_CONTROL).first
            if radio.count() > 0:
                return radio
        return None

    def _radio_by_value(self, container, option):
        controls = container.locator(RADIO_CONTROL)
        values = controls.evaluate_all(
            "els => els.map(e => [e.value, e.getAttribute('data-value'), e.getAttribute('aria-label')])"
        )
        wanted = {v.lower() for v in search_variants(option)}
        for i, candidates in enumerate(values):
            if any(c and c.lower() in wanted for c in candidates):
                return controls.nth(i)
        return None

    def _matches(self, text, option):
        text = (text or "").strip().lower()
        if not text:
            return False
        for variant in search_variants(option):
            variant = variant.lower()
            if text == variant or variant in text or is_fuzzy_match(text, variant, self.fuzzy_threshold):
                return True
        return False

    def _check_radio(self, radio):
        if not is_interactive(radio):
            logger.warning("Radio option is not visible or interactable")
            return False
        try:
            is_input = radio.evaluate("el => el.tagName === 'INPUT'")
            if is_input:
                return bool(radio.evaluate(CHECK_RADIO_JS))
            radio.click(timeout=3000)
            return True
        except Exception as e:
            logger.warning(f"Error selecting radio option: {e}")
            return False
