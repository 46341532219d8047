"""
Knowledge base taxonomy.
"""

from enum import Enum
from typing import Dict


class KnowledgeBaseId(Enum):
    """Topical knowledge bases the documents are tagged with."""
    FHIR = "fhir"
    VBC = "vbc"
    GRANTS = "grants"
    BILLING = "billing"
    IT_SECURITY = "it_security"
    OPERATIONS = "operations"
    COMPLIANCE = "compliance"


KB_DESCRIPTIONS: Dict[KnowledgeBaseId, str] = {
    KnowledgeBaseId.FHIR: "FHIR specifications, interoperability, health data exchange",
    KnowledgeBaseId.VBC: "Value-based care, quality measures, ACOs, MIPS, population health",
    KnowledgeBaseId.GRANTS: "Grant programs, funding opportunities, application guidance",
    KnowledgeBaseId.BILLING: "Medical billing, CPT/ICD coding, revenue cycle, reimbursement",
    KnowledgeBaseId.IT_SECURITY: "Healthcare IT, HIPAA, cybersecurity, EHR systems",
    KnowledgeBaseId.OPERATIONS: "Rural healthcare operations, CAH, RHC, workforce, telemedicine",
    KnowledgeBaseId.COMPLIANCE: "Regulations, CMS requirements, licensing, legal compliance",
}

# Most common query topic
DEFAULT_KB = KnowledgeBaseId.GRANTS

KNOWN_KB_IDS = frozenset(kb.value for kb in KnowledgeBaseId)
