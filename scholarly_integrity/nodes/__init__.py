"""LangGraph nodes for the integrity validation workflow."""

from scholarly_integrity.nodes.claim_extraction import claim_extraction_node
from scholarly_integrity.nodes.claim_assessment import assess_claim, claim_assessment_node
from scholarly_integrity.nodes.section_alignment import section_alignment_node
from scholarly_integrity.nodes.report import report_node

__all__ = [
    "claim_extraction_node",
    "assess_claim",
    "claim_assessment_node",
    "section_alignment_node",
    "report_node",
]
