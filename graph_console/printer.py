"""
    Printer — all user-facing console output.

    Informational output goes to ``out``, errors to ``err``.  Errors are
    coloured red only when ``err`` is attached to a terminal, so captured
    output (scripts, tests, pipes) stays plain.
"""
import sys
from typing import Optional, TextIO

from graph_console_api.answers import (
    Concept,
    ConceptMap,
    ConceptMapGroup,
    Numeric,
    NumericGroup,
    Replica,
)

_RED = "\033[31m"
_RESET = "\033[0m"


class Printer:

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr

    def info(self, message: str) -> None:
        self._out.write(message + "\n")
        self._out.flush()

    def error(self, message: str) -> None:
        if self._err.isatty():
            message = f"{_RED}{message}{_RESET}"
        self._err.write(message + "\n")
        self._err.flush()

    # ── Answers ──────────────────────────────────────────────────

    def concept_map(self, answer: ConceptMap) -> None:
        self.info(self.format_concept_map(answer))

    def concept_map_group(self, answer: ConceptMapGroup) -> None:
        lines = [f"{self.format_concept(answer.owner)} => {{"]
        for concept_map in answer.concept_maps:
            lines.append("    " + self.format_concept_map(concept_map))
        lines.append("}")
        self.info("\n".join(lines))

    def numeric(self, answer: Numeric) -> None:
        self.info(self.format_numeric(answer))

    def numeric_group(self, answer: NumericGroup) -> None:
        self.info(f"{self.format_concept(answer.owner)} => {self.format_numeric(answer.numeric)}")

    def database_replica(self, replica: Replica) -> None:
        role = "primary" if replica.is_primary else "secondary"
        preferred = "preferred" if replica.is_preferred else ""
        self.info(f"{replica.address:<30}{role:<12}{preferred:<12}term: {replica.term}".rstrip())

    # ── Formatting ───────────────────────────────────────────────

    @staticmethod
    def format_concept(concept: Concept) -> str:
        """
        Example:
            >>> Printer.format_concept(Concept("name", iid="0x01", value="Alice"))
            '"Alice" isa name'
        """
        if concept.is_type():
            return f"type {concept.type_label}"
        if concept.is_attribute():
            value = concept.value
            if isinstance(value, str):
                value = '"' + value.replace('"', '\\"') + '"'
            elif isinstance(value, bool):
                value = "true" if value else "false"
            return f"{value} isa {concept.type_label}"
        return f"iid {concept.iid} isa {concept.type_label}"

    @classmethod
    def format_concept_map(cls, answer: ConceptMap) -> str:
        if not answer.concepts:
            return "{ }"
        parts = [f"${variable} {cls.format_concept(concept)};"
                 for variable, concept in answer.concepts.items()]
        return "{ " + " ".join(parts) + " }"

    @staticmethod
    def format_numeric(answer: Numeric) -> str:
        return "NaN" if answer.is_nan() else str(answer.value)
