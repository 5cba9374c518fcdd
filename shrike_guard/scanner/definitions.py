"""Verdict vocabulary tables for the sanitizer.

All tables are built once at module load. Nothing is computed per call.

  THREAT_TYPE_MAP  — backend-internal threat labels → public ThreatType
  THREAT_GUIDANCE  — public ThreatType → fixed remediation text
  THREAT_SEVERITY  — public ThreatType → default Severity
  INTERNAL_FIELDS  — backend fields that expose detection methodology

Keys of THREAT_TYPE_MAP are already normalized (lowercase, underscores).
Every public ThreatType value maps to itself so normalization is idempotent.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from shrike_guard.models.verdict import Severity, ThreatType

# ─── Confidence buckets ───────────────────────────────────────────────────────

# Raw score >= HIGH threshold → "high"; >= MEDIUM threshold → "medium"; else "low".
CONFIDENCE_HIGH_THRESHOLD: float = 0.90
CONFIDENCE_MEDIUM_THRESHOLD: float = 0.70

# ─── Threat type synonyms ─────────────────────────────────────────────────────

_T = ThreatType

THREAT_TYPE_MAP: Mapping[str, ThreatType] = MappingProxyType({
    # ─── Prompt injection ─────────────────────────────────────────────────
    "prompt_injection": _T.PROMPT_INJECTION,
    "injection": _T.PROMPT_INJECTION,
    "inject": _T.PROMPT_INJECTION,
    "instruction_override": _T.PROMPT_INJECTION,
    "role_hijacking": _T.PROMPT_INJECTION,
    "context_manipulation": _T.PROMPT_INJECTION,
    "token_manipulation": _T.PROMPT_INJECTION,
    "indirect_injection": _T.PROMPT_INJECTION,
    "context_poisoning": _T.PROMPT_INJECTION,
    "function_injection": _T.PROMPT_INJECTION,
    "memory_injection": _T.PROMPT_INJECTION,
    "topic_mismatch": _T.PROMPT_INJECTION,
    # ─── Jailbreak ────────────────────────────────────────────────────────
    "jailbreak": _T.JAILBREAK,
    "jailbreak_attempt": _T.JAILBREAK,
    "safety_bypass": _T.JAILBREAK,
    "roleplay": _T.JAILBREAK,
    "hypothetical": _T.JAILBREAK,
    "completion_baiting": _T.JAILBREAK,
    "override": _T.JAILBREAK,
    "manipulate": _T.JAILBREAK,
    "tonality_drift_profanity": _T.JAILBREAK,
    "tonality_drift_casual": _T.JAILBREAK,
    "tonality_drift_hostile": _T.JAILBREAK,
    # ─── System prompt leak ───────────────────────────────────────────────
    "system_prompt_leak": _T.SYSTEM_PROMPT_LEAK,
    "system_prompt_extraction": _T.SYSTEM_PROMPT_LEAK,
    # ─── Data exfiltration ────────────────────────────────────────────────
    "data_exfiltration": _T.DATA_EXFILTRATION,
    "exfiltration": _T.DATA_EXFILTRATION,
    "exfiltrate": _T.DATA_EXFILTRATION,
    "extract": _T.DATA_EXFILTRATION,
    "data_leak": _T.DATA_EXFILTRATION,
    "information_disclosure": _T.DATA_EXFILTRATION,
    "credential_extraction": _T.DATA_EXFILTRATION,
    # ─── SQL injection ────────────────────────────────────────────────────
    "sql_injection": _T.SQL_INJECTION,
    "sqli": _T.SQL_INJECTION,
    "tautology": _T.SQL_INJECTION,
    "tautology_or": _T.SQL_INJECTION,
    "tautology_and": _T.SQL_INJECTION,
    "union_injection": _T.SQL_INJECTION,
    "stacked_query": _T.SQL_INJECTION,
    # ─── Path traversal ───────────────────────────────────────────────────
    "path_traversal": _T.PATH_TRAVERSAL,
    "directory_traversal": _T.PATH_TRAVERSAL,
    "path_violation": _T.PATH_TRAVERSAL,
    "file_access": _T.PATH_TRAVERSAL,
    "sensitive_path": _T.PATH_TRAVERSAL,
    "sensitive_extension": _T.PATH_TRAVERSAL,
    "blocked_extension": _T.PATH_TRAVERSAL,
    # ─── Secrets ──────────────────────────────────────────────────────────
    "secrets_exposure": _T.SECRETS_EXPOSURE,
    "secrets": _T.SECRETS_EXPOSURE,
    "api_key": _T.SECRETS_EXPOSURE,
    "credential": _T.SECRETS_EXPOSURE,
    "sensitive_file": _T.SECRETS_EXPOSURE,
    "content_violation": _T.SECRETS_EXPOSURE,
    "sensitive_content": _T.SECRETS_EXPOSURE,
    "secret_key": _T.SECRETS_EXPOSURE,
    "aws_key": _T.SECRETS_EXPOSURE,
    "private_key": _T.SECRETS_EXPOSURE,
    # ─── PII ──────────────────────────────────────────────────────────────
    "pii_exposure": _T.PII_EXPOSURE,
    "pii": _T.PII_EXPOSURE,
    "pii_leak": _T.PII_EXPOSURE,
    "personal_data": _T.PII_EXPOSURE,
    "pii_in_search": _T.PII_EXPOSURE,
    "pii_extraction": _T.PII_EXPOSURE,
    "ssn": _T.PII_EXPOSURE,
    "credit_card": _T.PII_EXPOSURE,
    "email_exposure": _T.PII_EXPOSURE,
    "phone_number": _T.PII_EXPOSURE,
    "unexpected_pii_leakage": _T.PII_EXPOSURE,
    # ─── Domain blocking ──────────────────────────────────────────────────
    "blocked_domain": _T.BLOCKED_DOMAIN,
    "suspicious_tld": _T.BLOCKED_DOMAIN,
    "suspicious_domain": _T.BLOCKED_DOMAIN,
    "malicious_url": _T.BLOCKED_DOMAIN,
    # ─── Toxicity ─────────────────────────────────────────────────────────
    "toxicity": _T.TOXICITY,
    "harmful_content": _T.TOXICITY,
    # ─── Malicious code ───────────────────────────────────────────────────
    "malicious_content": _T.MALICIOUS_CODE,
    "malicious_code": _T.MALICIOUS_CODE,
    "reverse_shell": _T.MALICIOUS_CODE,
    "web_shell": _T.MALICIOUS_CODE,
    "fork_bomb": _T.MALICIOUS_CODE,
    "crypto_miner": _T.MALICIOUS_CODE,
    "persistence": _T.MALICIOUS_CODE,
    "shell_injection": _T.MALICIOUS_CODE,
    # ─── Harmful intent ───────────────────────────────────────────────────
    "harmful_intent": _T.HARMFUL_INTENT,
    "dangerous_request": _T.HARMFUL_INTENT,
    # ─── Social engineering ───────────────────────────────────────────────
    "social_engineering": _T.SOCIAL_ENGINEERING,
    "emotional": _T.SOCIAL_ENGINEERING,
    "authority_claim": _T.SOCIAL_ENGINEERING,
    # ─── Privilege escalation / destructive operations ────────────────────
    "privilege_escalation": _T.PRIVILEGE_ESCALATION,
    "destructive_operation": _T.DESTRUCTIVE_OPERATION,
    # ─── Scan-side conditions ─────────────────────────────────────────────
    "scan_error": _T.SCAN_ERROR,
    "timeout": _T.SCAN_ERROR,
    "size_limit_exceeded": _T.SIZE_LIMIT_EXCEEDED,
    "size_limit": _T.SIZE_LIMIT_EXCEEDED,
})

# ─── Guidance ─────────────────────────────────────────────────────────────────

THREAT_GUIDANCE: Mapping[ThreatType, str] = MappingProxyType({
    _T.PROMPT_INJECTION: "This prompt contains patterns consistent with instruction override attempts.",
    _T.JAILBREAK: "This prompt attempts to bypass safety guidelines. The request has been blocked.",
    _T.SYSTEM_PROMPT_LEAK: "The response contains system prompt disclosure. The response has been blocked.",
    _T.DATA_EXFILTRATION: "This prompt may attempt to extract sensitive information.",
    _T.SQL_INJECTION: "This query contains potentially dangerous SQL patterns.",
    _T.PATH_TRAVERSAL: "This file path attempts to access directories outside the allowed scope.",
    _T.SECRETS_EXPOSURE: "This content contains patterns matching API keys, tokens, or credentials.",
    _T.PII_EXPOSURE: "This content contains personally identifiable information.",
    _T.BLOCKED_DOMAIN: "This web search targets a restricted domain.",
    _T.TOXICITY: "This content contains potentially harmful or inappropriate language.",
    _T.MALICIOUS_CODE: "This content contains patterns associated with malicious code.",
    _T.HARMFUL_INTENT: "This request contains content associated with harmful intent.",
    _T.SOCIAL_ENGINEERING: "This prompt contains social engineering patterns.",
    _T.PRIVILEGE_ESCALATION: "This query attempts to escalate privileges or gain unauthorized access.",
    _T.DESTRUCTIVE_OPERATION: "This query contains destructive operations. Review carefully.",
    _T.SCAN_ERROR: "The security scan could not be completed. Blocked as precaution.",
    _T.SIZE_LIMIT_EXCEEDED: "The content exceeds the maximum allowed size.",
    _T.UNKNOWN: "A security concern was detected. Please review the content.",
})

# ─── Default severity ─────────────────────────────────────────────────────────

THREAT_SEVERITY: Mapping[ThreatType, Severity] = MappingProxyType({
    _T.PROMPT_INJECTION: Severity.HIGH,
    _T.JAILBREAK: Severity.HIGH,
    _T.SYSTEM_PROMPT_LEAK: Severity.HIGH,
    _T.DATA_EXFILTRATION: Severity.HIGH,
    _T.SQL_INJECTION: Severity.CRITICAL,
    _T.PATH_TRAVERSAL: Severity.HIGH,
    _T.SECRETS_EXPOSURE: Severity.CRITICAL,
    _T.PII_EXPOSURE: Severity.HIGH,
    _T.BLOCKED_DOMAIN: Severity.MEDIUM,
    _T.TOXICITY: Severity.MEDIUM,
    _T.MALICIOUS_CODE: Severity.CRITICAL,
    _T.HARMFUL_INTENT: Severity.HIGH,
    _T.SOCIAL_ENGINEERING: Severity.MEDIUM,
    _T.PRIVILEGE_ESCALATION: Severity.CRITICAL,
    _T.DESTRUCTIVE_OPERATION: Severity.CRITICAL,
    _T.SCAN_ERROR: Severity.MEDIUM,
    _T.SIZE_LIMIT_EXCEEDED: Severity.LOW,
    _T.UNKNOWN: Severity.MEDIUM,
})

# ─── Internal fields ──────────────────────────────────────────────────────────

# Backend fields that describe HOW a detection was made. Never copied into a verdict.
INTERNAL_FIELDS: frozenset[str] = frozenset({
    "detected_by",
    "policy_id",
    "policy_name",
    "matched_pattern",
    "matched_text",
    "pattern",
    "scan_stage",
    "ai_reasoning",
    "llm_analysis",
    "performance_metrics",
    "performance",
})

del _T
