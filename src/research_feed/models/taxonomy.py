"""
Canonical option catalogs for preference editing.

Each option pairs the backend key with the label shown to the user.
Preferences are stored by key; labels are mapped back to keys on save.
"""

from pydantic import BaseModel, ConfigDict


class TaxonomyOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    label: str


class TaxonomyCatalog:
    """Ordered set of options with label -> key lookup."""

    def __init__(self, options: list[TaxonomyOption]):
        self.options = list(options)
        self._by_key = {option.key: option for option in self.options}
        self._by_label = {option.label: option for option in self.options}

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> "TaxonomyCatalog":
        return cls([TaxonomyOption(key=key, label=label) for key, label in pairs])

    @property
    def keys(self) -> list[str]:
        return [option.key for option in self.options]

    def key_for(self, value: str) -> str:
        """Return the canonical key for a key or a display label.

        Unknown values pass through unchanged so the server can reject them.
        """
        if value in self._by_key:
            return value
        option = self._by_label.get(value)
        return option.key if option else value

    def label_for(self, key: str) -> str:
        option = self._by_key.get(key)
        return option.label if option else key

    def __contains__(self, value: object) -> bool:
        return value in self._by_key or value in self._by_label

    def __len__(self) -> int:
        return len(self.options)


SUBSPECIALTIES = TaxonomyCatalog.from_pairs(
    [
        ("stroke", "Vascular Neurology (Stroke)"),
        ("epilepsy", "Epilepsy"),
        ("movement_disorders", "Movement Disorders"),
        ("neuromuscular", "Neuromuscular"),
        ("neuroimmunology", "Multiple Sclerosis & Neuroimmunology"),
        ("cognitive_neurology", "Cognitive & Behavioral Neurology (Dementia)"),
        ("neuro_oncology", "Neuro-Oncology"),
        ("headache", "Headache & Pain"),
        ("neurocritical_care", "Neurocritical Care"),
        ("pediatric_neurology", "Pediatric Neurology"),
        ("neuro_ophthalmology", "Neuro-Ophthalmology"),
        ("neuro_infectious", "Neuro-Infectious Disease"),
    ]
)

RESEARCH_TYPES = TaxonomyCatalog.from_pairs(
    [
        ("rct", "Randomized Controlled Trial"),
        ("systematic_review", "Systematic Review & Meta-Analysis"),
        ("guidelines", "Guidelines & Consensus"),
        ("case_report", "Case Report & Series"),
        ("review", "Review Article"),
        ("observational", "Observational Study"),
        ("basic_science", "Basic Science / Preclinical"),
    ]
)
