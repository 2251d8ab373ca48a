"""Default style-policy word lists; both can be overridden from YAML config."""

from __future__ import annotations

from typing import Dict

# Cliché verbs that get swapped out after an LLM revision.
DEFAULT_BANNED_WORDS: Dict[str, str] = {
    "spearheaded": "led",
    "orchestrated": "coordinated",
    "synergized": "integrated",
    "leveraged": "used",
    "facilitated": "enabled",
    "utilized": "used",
    "impacted": "improved",
}

# Accepted short forms that save width on the form.
DEFAULT_ABBREVIATIONS: Dict[str, str] = {
    "and": "&",
    "with": "w/",
    "without": "w/o",
    "information": "info",
    "approximately": "approx",
    "percent": "%",
    "number": "#",
    "management": "mgmt",
    "maintenance": "maint",
    "equipment": "equip",
    "operational": "ops",
    "organization": "org",
    "administration": "admin",
    "communication": "comm",
    "requirements": "reqts",
    "personnel": "psnl",
    "training": "trng",
    "professional": "prof",
    "development": "dev",
    "squadron": "sq",
    "headquarters": "HQ",
    "department": "dept",
    "government": "govt",
    "commander": "CC",
    "superintendent": "supt",
    "technical": "tech",
    "sergeant": "Sgt",
}
