from __future__ import annotations

from autofill.cascade import LocatorCandidate
from autofill.config import EngineConfig
from autofill.filler import DATE_HINT_JS, SET_TEXT_JS, FormFiller
from autofill.models import FailureKind, FieldSpec, FieldType, Profile
from autofill.orchestrator import FillOrchestrator, PatternCache
from autofill.overlay import Overlay


class FakeLocatorList:
    def __init__(self, count):
        self._count = count

    def count(self):
        return self._count


class FakePage:
    def __init__(self, controls=1):
        self.controls = controls
        self.queries = 0

    def locator(self, selector):
        self.queries += 1
        return FakeLocatorList(self.controls)


class FakeResolver:
    """Resolves every field except the ones listed in `missing`."""

    def __init__(self, missing=()):
        self.missing = set(missing)
        self.calls = []

    def resolve(self, candidates):
        self.calls.append(candidates)
        name = candidates[-1].expression
        if any(m in name for m in self.missing):
            return None, None
        return f"element:{len(self.calls)}", 0


class FakeFiller:
    def __init__(self, fail=(), explode=(), on_fill=None):
        self.fail = set(fail)
        self.explode = set(explode)
        self.on_fill = on_fill
        self.filled = []

    def fill(self, locator, field):
        if self.on_fill:
            self.on_fill(field)
        if field.name in self.explode:
            raise RuntimeError("page went away")
        self.filled.append(field.name)
        return field.name not in self.fail


class FakeSubmitter:
    def __init__(self):
        self.clicks = 0

    def click_next(self):
        self.clicks += 1
        return True


class RecordingOverlay(Overlay):
    def __init__(self):
        self.highlighted = []
        self.messages = []

    def highlight(self, locator, field_name):
        self.highlighted.append(field_name)

    def notify(self, message, level="success"):
        self.messages.append((level, message))


def build(config=None, **fakes):
    parts = dict(resolver=FakeResolver(), filler=FakeFiller(), submitter=FakeSubmitter(),
                 overlay=RecordingOverlay())
    parts.update(fakes)
    sleeps = []
    orch = FillOrchestrator(FakePage(), config or EngineConfig.no_delays(), sleep=sleeps.append, **parts)
    return orch, parts, sleeps


def profile(*names):
    return Profile(id="p", name="Test", fields=[FieldSpec(n, value="v") for n in names])


def test_fields_processed_in_order_and_failures_are_not_fatal():
    orch, parts, _ = build(
        resolver=FakeResolver(missing={"Nonexistent"}),
        filler=FakeFiller(fail={"Country"}, explode={"Phone"}),
    )
    report = orch.fill_profile(profile("Email", "Nonexistent", "Country", "Phone", "City"))

    assert (report.filled, report.total) == (2, 5)
    by_field = {r.field: r for r in report.results}
    assert [r.field for r in report.results] == ["Email", "Nonexistent", "Country", "Phone", "City"]
    assert by_field["Nonexistent"].failure == FailureKind.LOCATE
    assert by_field["Country"].failure == FailureKind.FILL
    assert by_field["Phone"].failure == FailureKind.UNEXPECTED
    assert by_field["City"].success
    assert parts["filler"].filled == ["Email", "Country", "City"]


def test_success_highlights_notifies_and_advances():
    orch, parts, sleeps = build(config=EngineConfig.no_delays(advance_delay=1.5))
    report = orch.fill_profile(profile("Email", "City"))
    assert report.success
    assert parts["overlay"].highlighted == ["Email", "City"]
    assert ("success", "2 of 2 fields filled") in parts["overlay"].messages
    assert parts["submitter"].clicks == 1
    assert 1.5 in sleeps
    assert not orch.is_filling


def test_no_advance_when_nothing_filled():
    orch, parts, _ = build(resolver=FakeResolver(missing={"Email"}))
    report = orch.fill_profile(profile("Email"))
    assert report.filled == 0
    assert parts["submitter"].clicks == 0
    assert parts["overlay"].messages[-1][0] == "warning"


def test_auto_advance_can_be_disabled():
    orch, parts, _ = build(config=EngineConfig.no_delays(auto_advance=False))
    orch.fill_profile(profile("Email"))
    assert parts["submitter"].clicks == 0


def test_reentrant_fill_is_dropped():
    nested = []
    orch = None

    def reenter(field):
        nested.append(orch.fill_profile(profile("Other")))

    orch, _, _ = build(filler=FakeFiller(on_fill=reenter))
    report = orch.fill_profile(profile("Email"))
    assert report.filled == 1
    assert nested == [None]
    assert not orch.is_filling
    # flag released: a later request runs normally
    assert orch.fill_profile(profile("Email")).filled == 1


def test_render_wait_is_bounded():
    page = FakePage(controls=0)
    sleeps = []
    orch = FillOrchestrator(page, EngineConfig.no_delays(render_wait_attempts=3, render_wait_delay=0.2),
                            sleep=sleeps.append, resolver=FakeResolver(), filler=FakeFiller(),
                            submitter=FakeSubmitter(), overlay=RecordingOverlay())
    report = orch.fill_profile(profile("Email"))
    assert page.queries == 3
    assert sleeps.count(0.2) == 2
    assert report.filled == 1


def test_pattern_cache_hint_goes_first():
    resolver = FakeResolver()
    orch, _, _ = build(resolver=resolver)
    orch.fill_profile(profile("Email"))
    first_winner = resolver.calls[0][0]
    assert orch.cache.get("Email") == first_winner

    hint = LocatorCandidate("//input[@id='cached']", tier="attribute")
    orch.cache.put("Email", hint)
    orch.fill_profile(profile("Email"))
    assert resolver.calls[-1][0] == hint


def test_pattern_cache_is_bounded_without_eviction():
    cache = PatternCache(max_entries=2)
    a, b, c = (LocatorCandidate(x) for x in ("//a", "//b", "//c"))
    cache.put("A", a)
    cache.put("B", b)
    cache.put("C", c)
    assert len(cache) == 2
    assert cache.get("C") is None
    cache.put("A", c)
    assert cache.get("A") == c


def test_filler_handles_every_field_type():
    filler = FormFiller(page=None, config=EngineConfig.no_delays())
    assert set(filler.handlers) == set(FieldType)


def test_unsupported_types_report_failure():
    filler = FormFiller(page=None, config=EngineConfig.no_delays())
    for field_type in (FieldType.SELECT, FieldType.CHECKBOX):
        assert filler.fill(object(), FieldSpec("X", field_type, "v")) is False


class BrokenOverlay(Overlay):
    def highlight(self, locator, field_name):
        raise RuntimeError("overlay detached")

    def notify(self, message, level="success"):
        raise RuntimeError("overlay detached")


def test_failing_overlay_does_not_lose_the_report():
    orch, parts, _ = build(overlay=BrokenOverlay())
    report = orch.fill_profile(profile("Email", "City"))
    assert (report.filled, report.total) == (2, 2)
    assert parts["submitter"].clicks == 1
    assert not orch.is_filling

    orch, _, _ = build(overlay=BrokenOverlay(), resolver=FakeResolver(missing={"Email"}))
    assert orch.fill_profile(profile("Email")).filled == 0


class StubbornDateLocator:
    """Reports a dd/mm/yyyy hint but rejects the click sequence."""

    def __init__(self):
        self.typed = []

    def evaluate(self, script, arg=None):
        if script == DATE_HINT_JS:
            return {"type": "text", "hint": "dd/mm/yyyy"}
        if script == SET_TEXT_JS:
            self.typed.append(arg)
            return arg
        raise RuntimeError("element intercepts pointer events")

    def focus(self, timeout=None):
        pass


def test_date_fallback_types_converted_value():
    locator = StubbornDateLocator()
    filler = FormFiller(page=None, config=EngineConfig.no_delays(), sleep=lambda s: None)
    assert filler.fill_date(locator, "3/5/2024") is True
    assert locator.typed == ["03/05/2024"]
