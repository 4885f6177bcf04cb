"""Cognitive sequence state machine.

Tracks a document's progress through the ordered cognitive steps
(Assessment -> Epistemological Inquiry -> Problem Formulation ->
Methodological Evaluation -> Action Plan -> complete). Violations are
findings, never exceptions.
"""

from scholarly_integrity.state.enums import FindingKind, FindingSeverity
from scholarly_integrity.state.models import DocumentSection, Finding


class CognitiveSequenceTracker:
    """
    One-document tracker over an ordered list of cognitive steps.

    Feed sections in document order through `visit`, then call `finish`.

    Example:
        tracker = CognitiveSequenceTracker(DEFAULT_COGNITIVE_STEPS)
        for section in sections:
            findings.extend(tracker.visit(section, canonical_name(section)))
        findings.extend(tracker.finish())
    """

    def __init__(self, steps: list[str]):
        self.steps = list(steps)
        self._expected = 0

    @property
    def expected_step(self) -> str | None:
        """Next step the sequence expects, or None once complete."""
        if self._expected >= len(self.steps):
            return None
        return self.steps[self._expected]

    @property
    def is_complete(self) -> bool:
        return self._expected >= len(self.steps)

    def _violation(
        self,
        message: str,
        section: DocumentSection | None = None,
        **evidence,
    ) -> Finding:
        return Finding(
            kind=FindingKind.SEQUENCE_VIOLATION,
            severity=FindingSeverity.STRUCTURAL,
            message=message,
            section_id=section.section_id if section else None,
            evidence=evidence,
        )

    def visit(self, section: DocumentSection, step_name: str | None) -> list[Finding]:
        """
        Advance the state machine by one section.

        Args:
            section: The section being visited.
            step_name: Canonical step name, or None for a non-step section.

        Returns:
            Sequence violations caused by this section.
        """
        expected = self.expected_step

        if step_name is None or step_name not in self.steps:
            if expected is None:
                return []
            return [self._violation(
                f"Section '{section.name}' appears before the cognitive sequence "
                f"completes; expected '{expected}' next",
                section,
                expected=expected,
                found=section.name,
            )]

        index = self.steps.index(step_name)

        if index == self._expected:
            self._expected += 1
            return []

        if index > self._expected:
            skipped = self.steps[self._expected:index]
            self._expected = index + 1
            return [self._violation(
                f"Section '{section.name}' skips ahead to '{step_name}'; "
                f"missing {', '.join(repr(s) for s in skipped)} before it",
                section,
                expected=expected,
                found=step_name,
                skipped=skipped,
            )]

        return [self._violation(
            f"Section '{section.name}' returns to '{step_name}' after the "
            f"sequence has moved past it",
            section,
            expected=expected,
            found=step_name,
        )]

    def finish(self) -> list[Finding]:
        """Report steps never reached by the end of the document."""
        if self.is_complete:
            return []
        missing = self.steps[self._expected:]
        return [self._violation(
            f"Cognitive sequence incomplete; missing "
            f"{', '.join(repr(s) for s in missing)}",
            missing=missing,
        )]
