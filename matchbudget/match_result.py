"""
MatchBudget - Match Result Module.

This module applies match events to a match result string and decodes
the string for display. The string is the whole state of a match: "H" is
a home goal, "A" an away goal and ";" marks the start of the second half.
Goals are appended in order; cancellations remove a single goal tag under
positional rules.

All functions are pure. The caller owns the string and must replace it
with the returned value; on failure the original string is left as is.

Classes:
    UpdateRuleViolation: Raised when an event cannot be applied.

Functions:
    apply_event: Applies an event and returns the new result string.
    parse_to_display: Decodes a result string into a MatchScore.
"""

from typing import Any, Optional, Union

from matchbudget.schema import (
    AWAY_GOAL_TAG,
    HALF_MARKER,
    HOME_GOAL_TAG,
    Event,
    MatchScore,
    MatchStatistics,
)


EVENT_DESCRIPTIONS = {
    Event.HOME_GOAL: "Home team scored a goal",
    Event.AWAY_GOAL: "Away team scored a goal",
    Event.CANCEL_HOME_GOAL: "Home team goal cancelled",
    Event.CANCEL_AWAY_GOAL: "Away team goal cancelled",
    Event.NEXT_PERIOD: "Match period updated",
}

_VALID_CHARACTERS = frozenset((HOME_GOAL_TAG, AWAY_GOAL_TAG, HALF_MARKER))


class UpdateRuleViolation(Exception):
    """
    Raised when an event violates the match result update rules.

    Attributes:
        event: The triggering event (or the raw unknown value).
        original_match_result: The match result before the attempt.
    """

    def __init__(self, event: Any, original_match_result: Optional[str], message: str):
        super().__init__(message)
        self.event = event
        self.original_match_result = original_match_result
        self.message = message

    def __str__(self) -> str:
        event_value = self.event.value if isinstance(self.event, Event) else self.event
        return (
            f"Update Match Result Exception, Event: {event_value}, "
            f"originalMatchResult: {self.original_match_result}"
        )


def apply_event(current_result: Optional[str], event: Union[Event, int]) -> str:
    """
    Applies a match event to a result string.

    Args:
        current_result: Current match result. None is treated as an
            empty match for goal and period events.
        event: Event to apply. Plain integers are accepted by value.

    Returns:
        The updated match result string.

    Raises:
        UpdateRuleViolation: If the event is unknown or no goal can be
            cancelled.

    Example:
        >>> apply_event("HHA", Event.CANCEL_HOME_GOAL)
        'HA'
        >>> apply_event("HHA;A", Event.NEXT_PERIOD)
        'HHA;A'
    """
    # True and 1.0 compare equal to 1 but are not event values
    if not isinstance(event, (Event, int)) or isinstance(event, bool):
        raise UpdateRuleViolation(event, current_result, f"Unknown event: {event!r}")
    try:
        event = Event(event)
    except ValueError:
        raise UpdateRuleViolation(
            event, current_result, f"Unknown event: {event!r}"
        ) from None

    result = current_result or ""

    if event is Event.HOME_GOAL:
        return result + HOME_GOAL_TAG
    elif event is Event.AWAY_GOAL:
        return result + AWAY_GOAL_TAG
    elif event is Event.NEXT_PERIOD:
        if HALF_MARKER in result:
            return result
        return result + HALF_MARKER
    elif event is Event.CANCEL_HOME_GOAL:
        return _cancel_goal(current_result, event, HOME_GOAL_TAG, "home")
    return _cancel_goal(current_result, event, AWAY_GOAL_TAG, "away")


def _cancel_goal(
    match_result: Optional[str],
    event: Event,
    tag: str,
    side: str
) -> str:
    if not match_result:
        raise UpdateRuleViolation(
            event,
            match_result,
            f"Cannot cancel {side} goal: no match data available"
        )

    index = _find_cancellable_index(match_result, tag)
    if index == -1:
        raise UpdateRuleViolation(
            event,
            match_result,
            f"Cannot cancel {side} goal: no '{tag}' found to cancel"
        )

    return match_result[:index] + match_result[index + 1:]


def _find_cancellable_index(match_result: str, tag: str) -> int:
    """
    Finds the goal tag a cancellation removes, or -1.

    Before the half marker the most recent tag is taken. After it, only
    the second half is searched, falling back to the tag written right
    before the marker. A marker at position 0 has no such predecessor.
    """
    marker_index = match_result.find(HALF_MARKER)

    if marker_index == -1:
        return match_result.rfind(tag)

    index = match_result.rfind(tag, marker_index + 1)
    if index != -1:
        return index

    if marker_index > 0 and match_result[marker_index - 1] == tag:
        return marker_index - 1
    return -1


def parse_to_display(match_result: Any) -> MatchScore:
    """
    Decodes a match result string into a score.

    Never fails: unrelated characters are ignored, and None, empty or
    non-string input decodes to 0:0 in the first half.

    Args:
        match_result: Raw match result string.

    Returns:
        MatchScore with goal counts and the half flag.

    Example:
        >>> str(parse_to_display("HHA;A"))
        '2:2 (Second Half)'
    """
    if not isinstance(match_result, str):
        return MatchScore()

    return MatchScore(
        home_goals=match_result.count(HOME_GOAL_TAG),
        away_goals=match_result.count(AWAY_GOAL_TAG),
        is_second_half=HALF_MARKER in match_result,
    )


def format_display(match_result: Any) -> str:
    """Returns the display string, e.g. "2:0 (First Half)"."""
    return str(parse_to_display(match_result))


def is_valid_match_result(match_result: Any) -> bool:
    """Returns True if the string holds only H, A and ; characters."""
    if not isinstance(match_result, str):
        return False
    return all(char in _VALID_CHARACTERS for char in match_result)


def get_match_statistics(match_result: Any) -> MatchStatistics:
    score = parse_to_display(match_result)
    return MatchStatistics(
        home_goals=score.home_goals,
        away_goals=score.away_goals,
        total_goals=score.home_goals + score.away_goals,
        is_second_half=score.is_second_half,
        display_result=str(score),
    )


def describe_event(event: Union[Event, int]) -> str:
    """Returns a human description of an event, or "Unknown event"."""
    try:
        return EVENT_DESCRIPTIONS[Event(event)]
    except ValueError:
        return "Unknown event"
