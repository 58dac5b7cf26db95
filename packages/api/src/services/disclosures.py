# This project was developed with assistance from AI tools.
"""Lease disclosure registry.

Every signer acknowledges the generic lease disclosures plus the set for
the listing's jurisdiction. Jurisdictions are keyed by a two-letter state
code; an unmapped or missing code falls back to the standard e-sign
disclosure. New jurisdictions are added with ``register``.
"""

# Disclosures every signer must acknowledge, regardless of jurisdiction.
GENERIC_LEASE_DISCLOSURES: list[dict[str, str]] = [
    {
        "id": "consent_electronic",
        "label": "Electronic Records Consent",
        "text": "I consent to receive and sign lease documents electronically.",
    },
    {
        "id": "consent_binding",
        "label": "Binding Agreement",
        "text": "I understand that my electronic signature is legally binding.",
    },
    {
        "id": "pet_policy",
        "label": "Pet Policy",
        "text": "I have read and agree to the pet policy for this property.",
    },
    {
        "id": "vehicle_disclosure",
        "label": "Vehicle and Parking",
        "text": "I have disclosed all vehicles that will be parked at this property.",
    },
    {
        "id": "damage_disclosure",
        "label": "Move-in Condition",
        "text": "I acknowledge my responsibility for damage beyond normal wear and tear.",
    },
    {
        "id": "attestation",
        "label": "Signature Attestation",
        "text": "I certify under penalty of perjury that this is my legal signature.",
    },
]

STANDARD_ESIGN_DISCLOSURE: dict[str, str] = {
    "id": "esign_standard",
    "label": "Electronic Signature Disclosure",
    "text": (
        "Under the federal E-SIGN Act, electronic signatures carry the same "
        "legal effect as handwritten signatures."
    ),
}

STATE_DISCLOSURES: dict[str, list[dict[str, str]]] = {
    "CA": [
        {
            "id": "esign_ca",
            "label": "California Electronic Signature Disclosure",
            "text": (
                "Under the California Uniform Electronic Transactions Act, this "
                "electronic signature is legally binding."
            ),
        },
        {
            "id": "rent_control",
            "label": "Rent Control Disclosure",
            "text": "I acknowledge that this property may be subject to California rent control laws.",
        },
        {
            "id": "megans_law",
            "label": "Megan's Law Disclosure",
            "text": (
                "I understand that information about registered sex offenders is "
                "available at www.meganslaw.ca.gov."
            ),
        },
    ],
    "NY": [
        {
            "id": "esign_ny",
            "label": "New York Electronic Signature Disclosure",
            "text": (
                "Under the New York Electronic Signatures and Records Act, this "
                "electronic signature is legally binding."
            ),
        },
        {
            "id": "fee_cap",
            "label": "Application Fee Cap Disclosure",
            "text": "I understand that New York law limits application fees to the legally allowed maximum.",
        },
    ],
    "TX": [
        {
            "id": "esign_tx",
            "label": "Texas Electronic Signature Disclosure",
            "text": (
                "Under the Texas Uniform Electronic Transactions Act, this "
                "electronic signature is legally binding."
            ),
        },
        {
            "id": "no_rent_control",
            "label": "No Rent Control Notice",
            "text": "I understand that Texas does not impose statewide rent control regulations.",
        },
    ],
}


def normalize_state_code(state_code: str | None) -> str | None:
    if state_code is None:
        return None
    code = state_code.strip().upper()
    return code or None


class DisclosureRegistry:
    """Maps jurisdiction codes to their disclosure lists."""

    def __init__(
        self,
        generic: list[dict[str, str]],
        fallback: list[dict[str, str]],
        by_state: dict[str, list[dict[str, str]]] | None = None,
    ):
        self._generic = list(generic)
        self._fallback = list(fallback)
        self._by_state: dict[str, list[dict[str, str]]] = {}
        for code, disclosures in (by_state or {}).items():
            self.register(code, disclosures)

    def register(self, state_code: str, disclosures: list[dict[str, str]]) -> None:
        code = normalize_state_code(state_code)
        if code is None:
            raise ValueError("A jurisdiction needs a non-empty state code.")
        self._by_state[code] = list(disclosures)

    def jurisdiction(self, state_code: str | None) -> list[dict[str, str]]:
        """Jurisdiction-specific disclosures, or the fallback if unmapped."""
        code = normalize_state_code(state_code)
        if code is None:
            return list(self._fallback)
        return list(self._by_state.get(code, self._fallback))

    def required(self, state_code: str | None) -> list[dict[str, str]]:
        """Generic disclosures followed by the jurisdiction set."""
        return self._generic + self.jurisdiction(state_code)

    def required_ids(self, state_code: str | None) -> list[str]:
        return [d["id"] for d in self.required(state_code)]


disclosure_registry = DisclosureRegistry(
    GENERIC_LEASE_DISCLOSURES,
    [STANDARD_ESIGN_DISCLOSURE],
    STATE_DISCLOSURES,
)
