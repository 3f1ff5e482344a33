"""
DOCKET - Document-Oriented Conversion of Knowledge into Engineering Tickets

Turns a long-form Confluence page into a ranked, deduplicated set of backlog
items ready for import into Jira.

Architecture:
- Intake Context: Storage-format markup parsing into a Document model
- Classification Context: Rule-based section classification and item generation
- Analysis Context: Ranking, time-boxed caching and the inbound service surface
- Creation Context: Sequential submission of reviewed items to the tracker
"""

__version__ = "0.1.0"
