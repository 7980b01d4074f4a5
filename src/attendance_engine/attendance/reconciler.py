from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import day_bounds, local_date, local_midnight
from ..core.constants import ONE_TICK
from ..core.enums import IntervalQuality, PunchDirection
from ..core.exceptions import MalformedPunchSequence
from ..punches.model import PunchEvent
from .model import WorkInterval

logger = logging.getLogger(__name__)


@dataclass
class _Draft:
    start: datetime
    end: Optional[datetime]
    quality: IntervalQuality
    note: Optional[str] = None


def deduplicate(punches: Iterable[PunchEvent]) -> List[PunchEvent]:
    """Sort punches by instant and drop retransmissions.

    Ties on the instant are broken by insertion time; the oldest insertion
    wins and every later punch at the same instant is dropped.
    """

    ordered = sorted(punches, key=lambda p: p.sort_key)
    kept: List[PunchEvent] = []
    for punch in ordered:
        if kept and kept[-1].punched_at == punch.punched_at:
            logger.warning(
                "Dropping retransmitted punch for employee_id=%s at %s (%s)",
                punch.employee_id,
                punch.punched_at.isoformat(),
                punch.direction.value,
            )
            continue
        kept.append(punch)
    return kept


class IntervalReconciler:
    """Pairs raw punches into ordered, non-overlapping work intervals.

    Intervals are attributed to the local date of their start punch, so a
    shift crossing midnight belongs entirely to the day it began.
    """

    def __init__(self, tz: tzinfo):
        self._tz = tz

    def reconcile(
        self,
        employee_id: int,
        work_date: date,
        punches: Sequence[PunchEvent],
        *,
        window_start: Optional[datetime] = None,
        is_today: bool = False,
        expected_end: Optional[datetime] = None,
        now: Optional[datetime] = None,
        strict: bool = True,
    ) -> List[WorkInterval]:
        """Reconcile the punches of one fetch window for ``work_date``.

        ``punches`` may extend before and after the day (lookback and
        lookahead); only intervals attributed to ``work_date`` are returned.

        A trailing interval of a past day is kept open while ``now`` is
        still before ``expected_end`` (a night shift still running).

        With ``strict`` a window that opens with an unmatched ``out`` on
        ``work_date`` raises MalformedPunchSequence so the caller can
        widen the lookback. Without it the slice becomes ``anomalous``.
        """

        day_start = local_midnight(work_date, self._tz)
        drafts = self._walk(
            deduplicate(punches),
            work_date=work_date,
            day_start=day_start,
            window_start=window_start,
            expected_end=expected_end,
            strict=strict,
        )

        if drafts and drafts[-1].end is None:
            trailing = drafts[-1]
            shift_running = now is not None and expected_end is not None and now < expected_end
            still_running = (is_today or shift_running) and local_date(trailing.start, self._tz) == work_date
            if not still_running:
                self._settle_trailing(trailing, employee_id=employee_id, work_date=work_date, expected_end=expected_end)

        intervals = [
            WorkInterval(
                employee_id=employee_id,
                work_date=work_date,
                start=d.start,
                end=d.end,
                quality=d.quality,
                note=d.note,
            )
            for d in drafts
            if local_date(d.start, self._tz) == work_date
        ]
        intervals.sort(key=lambda i: i.start)
        return intervals

    def _walk(
        self,
        punches: Sequence[PunchEvent],
        *,
        work_date: date,
        day_start: datetime,
        window_start: Optional[datetime],
        expected_end: Optional[datetime],
        strict: bool,
    ) -> List[_Draft]:
        drafts: List[_Draft] = []
        current: Optional[_Draft] = None
        last_boundary: Optional[datetime] = None

        def emit(start: datetime, end: datetime, quality: IntervalQuality, note: str) -> None:
            if end <= start:
                logger.warning("Skipping empty %s slice at %s", quality.value, start.isoformat())
                return
            drafts.append(_Draft(start=start, end=end, quality=quality, note=note))

        for index, punch in enumerate(punches):
            if punch.direction == PunchDirection.IN:
                if current is not None:
                    # Two consecutive ins: the out in between was missed.
                    current.end = punch.punched_at - ONE_TICK
                    if local_date(punch.punched_at, self._tz) > local_date(current.start, self._tz):
                        # Forgotten out on an earlier day; the next shift must not extend it.
                        current.end = min(current.end, self._close_at(current.start, work_date, expected_end))
                    current.quality = IntervalQuality.ANOMALOUS
                    current.note = "missing out punch"
                    if current.end > current.start:
                        drafts.append(current)
                    else:
                        logger.warning("Skipping empty anomalous slice at %s", current.start.isoformat())
                    logger.warning(
                        "Consecutive in punches for employee_id=%s; closed interval at %s",
                        punch.employee_id,
                        current.end.isoformat(),
                    )
                    last_boundary = current.end
                current = _Draft(start=punch.punched_at, end=None, quality=IntervalQuality.OPEN)
                continue

            if current is not None:
                current.end = punch.punched_at
                current.quality = IntervalQuality.COMPLETE
                drafts.append(current)
                current = None
                last_boundary = punch.punched_at
                continue

            # An out with nothing open.
            out_at = punch.punched_at
            out_midnight = local_midnight(local_date(out_at, self._tz), self._tz)

            if last_boundary is not None and local_date(last_boundary, self._tz) == local_date(out_at, self._tz):
                emit(last_boundary + ONE_TICK, out_at, IntervalQuality.INFERRED, "missing in punch")
                logger.warning("Inferred missing in punch for employee_id=%s before %s", punch.employee_id, out_at.isoformat())
            elif out_at < day_start:
                # Closes something from an earlier day; cannot touch this one.
                logger.debug("Ignoring unmatched out before the day for employee_id=%s at %s", punch.employee_id, out_at.isoformat())
            elif index == 0 and strict and local_date(out_at, self._tz) == work_date:
                raise MalformedPunchSequence(
                    f"Window starts with an unmatched out punch at {out_at.isoformat()}",
                    punch=punch,
                )
            else:
                floor = out_midnight
                if window_start is not None and window_start > floor:
                    floor = window_start
                if last_boundary is not None and last_boundary + ONE_TICK > floor:
                    floor = last_boundary + ONE_TICK
                emit(floor, out_at, IntervalQuality.ANOMALOUS, "unmatched out punch")
                logger.warning("Unmatched out punch for employee_id=%s at %s", punch.employee_id, out_at.isoformat())
            last_boundary = out_at

        if current is not None:
            drafts.append(current)
        return drafts

    def _close_at(self, start: datetime, work_date: date, expected_end: Optional[datetime]) -> datetime:
        """Where an unclosed interval ends: the scheduled end, else midnight."""
        if expected_end is not None and expected_end > start and local_date(start, self._tz) == work_date:
            return expected_end
        return day_bounds(local_date(start, self._tz), self._tz)[1]

    def _settle_trailing(self, draft: _Draft, *, employee_id: int, work_date: date, expected_end: Optional[datetime]) -> None:
        end = self._close_at(draft.start, work_date, expected_end)
        draft.end = end
        draft.quality = IntervalQuality.ANOMALOUS
        draft.note = "never punched out"
        logger.warning(
            "Unclosed interval for employee_id=%s starting %s closed as anomalous at %s",
            employee_id,
            draft.start.isoformat(),
            end.isoformat(),
        )
