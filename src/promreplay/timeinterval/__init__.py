"""Recurring time interval predicates used to guard override rules."""

from promreplay.timeinterval.interval import InclusiveRange, TimeInterval, TimeRange

__all__ = ["InclusiveRange", "TimeInterval", "TimeRange"]
