"""
Filter Compiler

Translates a validated ExecutionLogQuery into a store Predicate.

DESIGN RULES:
- Pure function of the query; never raises
- Every present field adds one independent AND'd constraint
- `search` and `ai_response` share ONE disjunctive group
- `customer_message` is its own AND'd constraint
- `final_decision` expands into its own disjunctive group of known encodings
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from querying.predicate import MATCH_ALL, Eq, Match, Ne, Predicate, Range, all_of, any_of
from schemas.query import ExecutionLogQuery, ExecutionLogStatsFilter


logger = logging.getLogger(__name__)


SEARCH_FIELDS: Tuple[str, ...] = (
    "original_message",
    "execution_id",
    "conversation_id",
    "context",
)

AI_RESPONSE_FIELDS: Tuple[str, ...] = (
    "final_response.final_message",
    "final_response.response.final_message",
    "final_response.response.ai_output.text",
    "steps.response.text",
)


def _decision_match(pattern: str) -> List[Predicate]:
    return [
        Match("final_response.ai_output.decision", pattern),
        Match("final_response.response.decision", pattern),
    ]


# Known payload encodings per decision label, OR'd together when filtering.
DECISION_ENCODINGS: Dict[str, Tuple[Predicate, ...]] = {
    "SENT_ANSWER": (
        *_decision_match("DIRECT_REPLY|SENT_ANSWER"),
        Eq("final_response.context", "TRY_ANSWER"),
        Match("steps.message", "sent_answer"),
        Eq("steps.metadata.step_type", "SENT_ANSWER"),
        all_of(
            Eq("status", "completed"),
            Ne("final_response.response.requires_human_assistance", True),
        ),
    ),
    "REQUEST_HUMAN_ASSISTANCE": (
        *_decision_match("REQUEST_HUMAN_ASSISTANCE|HUMAN_ASSISTANCE"),
        Eq("final_response.context", "TRY_ANSWER"),
        Eq("final_response.response.requires_human_assistance", True),
        Match("steps.message", "request_human_assistance"),
        Eq("steps.metadata.step_type", "REQUEST_HUMAN_ASSISTANCE"),
    ),
    "NO_ANSWER_GIVEN": (
        *_decision_match("NO_ANSWER|NO_ANSWER_GIVEN"),
        Eq("final_response.context", "TRY_ANSWER"),
        Match("steps.message", "no_answer_given"),
        Eq("steps.metadata.step_type", "NO_ANSWER_GIVEN"),
    ),
    "DIRECT_REPLY": tuple(_decision_match("DIRECT_REPLY")),
    "FALLBACK_REPLY": tuple(_decision_match("FALLBACK_REPLY")),
    "FAILED": (Eq("status", "failed"),),
    "RUNNING": (Eq("status", "running"),),
}


def _contains(field: str, text: str) -> Match:
    """Case-insensitive substring match on literal user text."""
    return Match(field, re.escape(text))


class FilterCompiler:
    """
    Stateless compiler from query models to predicates.

    Injected into ExecutionLogService; safe to share across requests.
    """

    def compile(self, query: ExecutionLogQuery) -> Predicate:
        """
        Compile a list query into a predicate.

        Returns:
            MATCH_ALL when no filter field is set
        """
        clauses: List[Predicate] = []

        if query.status:
            clauses.append(Eq("status", query.status.value))

        if query.context:
            clauses.append(Eq("context", query.context))

        if query.conversation_id:
            clauses.append(Eq("conversation_id", query.conversation_id))

        if query.business_id:
            clauses.append(Eq("business_id", query.business_id))

        # Text search: `search` and `ai_response` union into one OR group
        text_group: List[Predicate] = []
        if query.search:
            text_group.extend(_contains(f, query.search) for f in SEARCH_FIELDS)
        if query.ai_response:
            text_group.extend(_contains(f, query.ai_response) for f in AI_RESPONSE_FIELDS)
        if text_group:
            clauses.append(any_of(*text_group))

        if query.customer_message:
            clauses.append(_contains("original_message", query.customer_message))

        if query.final_decision:
            decision_clause = self.compile_decision(query.final_decision)
            if decision_clause is not None:
                clauses.append(decision_clause)

        date_range = self._date_range(query)
        if date_range is not None:
            clauses.append(date_range)

        if query.step_type:
            # Producers have written step types in either case
            clauses.append(Match("steps.step_type", f"^{re.escape(query.step_type.strip())}$"))

        if not clauses:
            return MATCH_ALL
        return all_of(*clauses)

    def compile_stats(self, stats_filter: ExecutionLogStatsFilter) -> Predicate:
        """Compile the statistics filter (business, context, date range)."""
        clauses: List[Predicate] = []

        if stats_filter.business_id:
            clauses.append(Eq("business_id", stats_filter.business_id))

        if stats_filter.context:
            clauses.append(Eq("context", stats_filter.context))

        date_range = self._date_range(stats_filter)
        if date_range is not None:
            clauses.append(date_range)

        if not clauses:
            return MATCH_ALL
        return all_of(*clauses)

    def compile_decision(self, decision: str) -> Optional[Predicate]:
        """
        Expand a decision label into its OR'd encodings.

        Returns:
            A predicate, or None for an unrecognized label (no constraint)
        """
        encodings = DECISION_ENCODINGS.get(decision.strip().upper())
        if not encodings:
            logger.warning(f"[FILTER] Unrecognized final_decision '{decision}', no constraint added")
            return None
        return any_of(*encodings)

    @staticmethod
    def _date_range(stats_filter: ExecutionLogStatsFilter) -> Optional[Predicate]:
        if stats_filter.start_date is None and stats_filter.end_date is None:
            return None
        return Range("start_time", gte=stats_filter.start_date, lte=stats_filter.end_date)
