"""
Tag tables: hostnames, title keywords and institution names mapped to labels.
"""

from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class HostRule(BaseModel):
    """Labels for a link hostname suffix."""

    model_config = ConfigDict(frozen=True)

    host: str
    tags: Tuple[str, ...]

    @field_validator("host")
    @classmethod
    def _bare_hostname(cls, value: str) -> str:
        value = value.strip().lower()
        if not value or "/" in value or ":" in value or value.startswith("www."):
            raise ValueError(f"host rule must be a bare hostname suffix, got {value!r}")
        return value

    @field_validator("tags")
    @classmethod
    def _non_empty_tags(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value or any(not tag.strip() for tag in value):
            raise ValueError("host rule needs at least one non-blank tag")
        return value

    def matches(self, hostname: str) -> bool:
        return hostname == self.host or hostname.endswith("." + self.host)


class KeywordRule(BaseModel):
    """Labels added when any fragment occurs in a text field (case-insensitive)."""

    model_config = ConfigDict(frozen=True)

    fragments: Tuple[str, ...]
    tags: Tuple[str, ...]

    @field_validator("fragments")
    @classmethod
    def _lowercase_fragments(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value or any(not fragment.strip() for fragment in value):
            raise ValueError("keyword rule needs at least one non-blank fragment")
        return tuple(fragment.lower() for fragment in value)

    def matches(self, text: str) -> bool:
        text = text.lower()
        return any(fragment in text for fragment in self.fragments)


HOST_RULES: List[HostRule] = [
    # Canada regulators
    HostRule(host="osfi-bsif.gc.ca", tags=("Canada", "OSFI", "Regulator")),
    HostRule(host="priv.gc.ca", tags=("Canada", "PIPEDA", "OPC", "Regulator")),
    HostRule(host="lautorite.qc.ca", tags=("Canada", "AMF", "Regulator")),
    HostRule(host="rcmp-grc.gc.ca", tags=("Canada", "RCMP")),
    HostRule(host="cdic.ca", tags=("Canada", "CDIC", "Regulator")),
    HostRule(host="fintrac-canafe.canada.ca", tags=("Canada", "FINTRAC", "Regulator")),
    # Shared by CRA, FCAC and others; institution labels come from the source name
    HostRule(host="canada.ca", tags=("Canada",)),
    HostRule(host="ised-isde.canada.ca", tags=("Canada", "CASL")),

    # UK / HK / EU / AU / SG / US
    HostRule(host="fca.org.uk", tags=("UK", "FCA", "Regulator")),
    HostRule(host="hkma.gov.hk", tags=("Hong Kong", "HKMA", "Regulator")),
    HostRule(host="eba.europa.eu", tags=("EU", "EBA", "Regulator")),
    HostRule(host="austrac.gov.au", tags=("Australia", "AUSTRAC", "Regulator")),
    HostRule(host="rba.gov.au", tags=("Australia", "RBA", "Central Bank")),
    HostRule(host="mas.gov.sg", tags=("Singapore", "MAS", "Regulator")),
    HostRule(host="sec.gov", tags=("US", "SEC", "Regulator")),
    HostRule(host="fincen.gov", tags=("US", "FinCEN", "Regulator")),
    HostRule(host="federalreserve.gov", tags=("US", "Federal Reserve", "Central Bank")),

    # Card networks
    HostRule(host="visa.com", tags=("Visa",)),
    HostRule(host="mastercard.com", tags=("Mastercard",)),
]

# Card networks mentioned in wire-service headlines
TITLE_RULES: List[KeywordRule] = [
    KeywordRule(fragments=("mastercard",), tags=("Mastercard",)),
    KeywordRule(fragments=("visa ",), tags=("Visa",)),
]

SOURCE_RULES: List[KeywordRule] = [
    KeywordRule(fragments=("financial consumer agency",), tags=("FCAC", "Canada")),
    KeywordRule(fragments=("canada revenue",), tags=("CRA", "Canada")),
    KeywordRule(fragments=("office of the privacy",), tags=("PIPEDA", "OPC", "Canada")),
    KeywordRule(
        fragments=("office of the superintendent of financial institutions",),
        tags=("OSFI", "Canada"),
    ),
    KeywordRule(
        fragments=("autorité des marchés financiers", "autorite des marches financiers"),
        tags=("AMF", "Canada"),
    ),
    KeywordRule(fragments=("royal canadian mounted police", "rcmp"), tags=("RCMP", "Canada")),
    KeywordRule(fragments=("canada deposit insurance",), tags=("CDIC", "Canada")),
    KeywordRule(fragments=("canadian anti-spam legislation", "casl"), tags=("CASL", "Canada")),
    KeywordRule(fragments=("financial transactions and reports analysis",), tags=("FINTRAC", "Canada")),
]

# Filter vocabulary offered per region by the browser listing
REGION_PREFERRED_TAGS: Dict[str, Tuple[str, ...]] = {
    "Canada": ("OSFI", "FINTRAC", "FCAC", "CRA", "OPC", "PIPEDA", "AMF", "RCMP", "CDIC", "CASL"),
    "Card Networks": ("Visa", "Mastercard"),
}
