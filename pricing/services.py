import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

from Clubs.exceptions import ConflictError, InputValidationError, NotFoundError
from Clubs.models import Court
from Clubs.utils import TimeRange, minutes_to_time, normalize_time, time_to_minutes

from .models import HolidayDate, PriceRule
from .rules import (
    Holiday,
    RuleSnapshot,
    SpecificDate,
    SpecificDay,
    build_target,
    build_window,
    targets_can_share_day,
)

logger = logging.getLogger(__name__)


# ---------------------------------
# LOADING
# ---------------------------------

def load_holiday_dates(holiday_ids):
    ids = {holiday_id for holiday_id in holiday_ids if holiday_id is not None}
    if not ids:
        return {}
    return dict(HolidayDate.objects.filter(id__in=ids).values_list("id", "date"))


def load_rule_snapshots(court_id, exclude_rule_id=None):
    rules = PriceRule.objects.filter(court_id=court_id).order_by("id")
    if exclude_rule_id is not None:
        rules = rules.exclude(pk=exclude_rule_id)

    rules = list(rules)
    holiday_dates = load_holiday_dates(rule.holiday_id for rule in rules)

    snapshots = []
    for rule in rules:
        try:
            snapshots.append(RuleSnapshot.from_model(rule, holiday_dates))
        except InputValidationError as exc:
            # Stored rows that bypassed validation never price anything
            logger.warning(
                "Skipping invalid price rule %s of court %s: %s",
                rule.pk, court_id, exc.detail,
            )

    return snapshots


def get_court_or_404(court_id):
    court = Court.objects.filter(pk=court_id).first()
    if court is None:
        raise NotFoundError("Court not found")
    return court


# ---------------------------------
# RULE STORE (CONFLICT DETECTION)
# ---------------------------------

def rules_conflict(candidate, existing):
    return (
        candidate.window.overlaps(existing.window)
        and targets_can_share_day(candidate.target, existing.target)
    )


def find_conflicting_rule(court_id, candidate, exclude_rule_id=None):
    """
    First stored rule of the court that could price the same instant
    as `candidate`, or None.
    """
    for existing in load_rule_snapshots(court_id, exclude_rule_id):
        if rules_conflict(candidate, existing):
            return existing
    return None


def _target_fields(target):
    return {
        "rule_type": target.rule_type,
        "day_of_week": target.day_of_week if isinstance(target, SpecificDay) else None,
        "date": target.date if isinstance(target, SpecificDate) else None,
        "holiday_id": target.holiday_id if isinstance(target, Holiday) else None,
    }


def build_candidate(fields, instance=None):
    """
    Validate the effective fields of a rule and return it as a snapshot.

    `fields` holds rule_type, day_of_week, date, holiday_id, start_time,
    end_time and price_cents. Raises InputValidationError or
    NotFoundError (holiday).
    """
    price_cents = fields.get("price_cents")
    if isinstance(price_cents, bool) or not isinstance(price_cents, int) or price_cents < 0:
        raise InputValidationError(
            "priceCents must be a non-negative number",
            code="invalid_price",
        )

    window = build_window(fields.get("start_time"), fields.get("end_time"))

    target = build_target(
        fields.get("rule_type"),
        day_of_week=fields.get("day_of_week"),
        date=fields.get("date"),
        holiday_id=fields.get("holiday_id"),
    )

    if isinstance(target, Holiday):
        holiday = HolidayDate.objects.filter(pk=target.holiday_id).first()
        if holiday is not None:
            target = Holiday(target.holiday_id, holiday.date)
        elif instance is None or instance.holiday_id != target.holiday_id:
            # Keeping an orphaned reference is allowed, pointing at a missing one is not
            raise NotFoundError("Holiday not found")

    return RuleSnapshot(target=target, window=window, price_cents=price_cents)


def ensure_no_conflict(court_id, candidate, exclude_rule_id=None):
    conflict = find_conflicting_rule(court_id, candidate, exclude_rule_id)

    if conflict:
        logger.info(
            "Rejected %s for court %s: conflicts with rule %s",
            candidate.describe(), court_id, conflict.id,
        )
        raise ConflictError(
            f"Time range conflicts with existing {conflict.describe()}"
        )


def save_price_rule(court, fields, instance=None):
    """
    Create (or update `instance`) a price rule for `court`.
    Raises InputValidationError, NotFoundError (holiday) or ConflictError.
    Nothing is written when an error is raised.
    """
    candidate = build_candidate(fields, instance)

    with transaction.atomic():
        # Serialize rule writes per court
        Court.objects.select_for_update().filter(pk=court.pk).first()

        ensure_no_conflict(
            court.pk,
            candidate,
            exclude_rule_id=instance.pk if instance else None,
        )

        rule = instance or PriceRule(court=court)
        for name, value in _target_fields(candidate.target).items():
            setattr(rule, name, value)
        rule.start_time = candidate.window.start
        rule.end_time = candidate.window.end
        rule.price_cents = candidate.price_cents
        rule.save()

    return rule


# ---------------------------------
# PRICE RESOLUTION
# ---------------------------------

def prorate(price_cents, duration_minutes):
    """
    Scale an hourly rate to `duration_minutes`, rounding half up
    to a whole minor unit.
    """
    amount = Decimal(price_cents) * Decimal(duration_minutes) / Decimal(60)
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def slot_window(start, duration_minutes):
    start_minutes = time_to_minutes(normalize_time(start))
    return TimeRange.from_minutes(start_minutes, start_minutes + duration_minutes)


def select_rule(rules, day, window):
    """
    The most specific rule whose day selector matches `day` and whose
    window fully contains `window`. Partial overlap never matches.
    """
    matching = [
        rule for rule in rules
        if rule.target.matches(day) and rule.window.contains(window)
    ]
    if not matching:
        return None
    return min(matching, key=RuleSnapshot.sort_key)


def resolve_price(rules, default_price_cents, day, start, duration_minutes):
    rule = select_rule(rules, day, slot_window(start, duration_minutes))
    rate = rule.price_cents if rule else default_price_cents
    return prorate(rate, duration_minutes)


def price_for_court(court, day, start, duration_minutes):
    """
    Price of a slot on an already loaded court (anything with id and
    default_price_cents).
    """
    rules = load_rule_snapshots(court.id)
    return resolve_price(rules, court.default_price_cents, day, start, duration_minutes)


def get_resolved_price_for_slot(court_id, day, start, duration_minutes):
    court = get_court_or_404(court_id)
    return price_for_court(court, day, start, duration_minutes)


# ---------------------------------
# DAY TIMELINE
# ---------------------------------

@dataclass(frozen=True)
class PriceSegment:
    start: str
    end: str
    price_cents: int


def _uncovered_parts(start, end, covered):
    parts = []
    current = start

    for covered_start, covered_end in sorted(covered):
        if current >= end:
            break
        if covered_end <= current:
            continue
        if covered_start > current:
            parts.append((current, min(covered_start, end)))
        current = max(current, covered_end)

    if current < end:
        parts.append((current, end))

    return parts


def build_price_timeline(rules, day):
    """
    Segments of the day priced by rules. Higher priority rules are laid
    down first; lower ones only fill what is still uncovered.
    """
    matching = sorted(
        (rule for rule in rules if rule.target.matches(day)),
        key=RuleSnapshot.sort_key,
    )

    covered = []
    pieces = []
    for rule in matching:
        for part in _uncovered_parts(rule.window.start_minutes, rule.window.end_minutes, covered):
            pieces.append((part[0], part[1], rule.price_cents))
            covered.append(part)

    pieces.sort()

    merged = []
    for start, end, price_cents in pieces:
        if merged and merged[-1][2] == price_cents and merged[-1][1] == start:
            merged[-1] = (merged[-1][0], end, price_cents)
        else:
            merged.append((start, end, price_cents))

    return [
        PriceSegment(minutes_to_time(start), minutes_to_time(end), price_cents)
        for start, end, price_cents in merged
    ]


def get_price_timeline_for_day(court_id, day):
    court = get_court_or_404(court_id)
    return build_price_timeline(load_rule_snapshots(court.pk), day)


# ---------------------------------
# PRICE BREAKDOWN FOR A SLOT
# ---------------------------------

@dataclass(frozen=True)
class BreakdownSegment:
    start: str
    end: str
    minutes: int
    price_cents: int


@dataclass(frozen=True)
class PriceBreakdown:
    total_price_cents: int
    segments: list


def build_price_breakdown(rules, default_price_cents, day, start, duration_minutes):
    """
    Minute-by-minute split of a slot across the day's price timeline.
    Parts no rule covers are charged at the default rate. Each part is
    prorated on its own; the total is the sum of the parts.
    """
    window = slot_window(start, duration_minutes)
    slot_start, slot_end = window.start_minutes, window.end_minutes

    parts = []
    current = slot_start
    for segment in build_price_timeline(rules, day):
        segment_start = time_to_minutes(segment.start)
        segment_end = time_to_minutes(segment.end)

        if segment_end <= current:
            continue
        if segment_start >= slot_end:
            break

        if segment_start > current:
            parts.append((current, segment_start, default_price_cents))
            current = segment_start

        part_end = min(segment_end, slot_end)
        parts.append((current, part_end, segment.price_cents))
        current = part_end

    if current < slot_end:
        parts.append((current, slot_end, default_price_cents))

    segments = [
        BreakdownSegment(
            start=minutes_to_time(part_start),
            end=minutes_to_time(part_end),
            minutes=part_end - part_start,
            price_cents=prorate(rate, part_end - part_start),
        )
        for part_start, part_end, rate in parts
    ]

    return PriceBreakdown(
        total_price_cents=sum(segment.price_cents for segment in segments),
        segments=segments,
    )


def get_price_breakdown_for_slot(court_id, day, start, duration_minutes):
    court = get_court_or_404(court_id)
    return build_price_breakdown(
        load_rule_snapshots(court.pk),
        court.default_price_cents,
        day,
        start,
        duration_minutes,
    )
