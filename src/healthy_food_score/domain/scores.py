"""Score models and the versioned score record."""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    PrivateAttr,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)

V1 = "v1"
V1_LEGACY = "v1_legacy"
V2 = "v2"
SCORE_VERSIONS = (V1, V1_LEGACY, V2)


class V1Scores(BaseModel):
    """Sigmoid benefit/risk model output.

    Intermediate values default to zero so blobs stored by older clients,
    which used other key names, still parse. Only ``HFS`` is required.
    """

    model_config = ConfigDict(frozen=True)

    model: Literal["sigmoid"] = "sigmoid"
    HFS_version: str = V1
    net_carbs: float = 0.0
    ethanol_g: float = 0.0
    non_water_mass: float = 0.0
    water_eq: float = 0.0
    dose_relevance: float = 0.0
    hydration_benefit: float = 0.0
    benefits: float = 0.0
    metabolic_risk: float = 0.0
    processing_risk: float = 0.0
    behavioral_risk: float = 0.0
    red_flag_risk: float = 0.0
    risk_core: float = 0.0
    total_risk: float = 0.0
    raw_score: float = 0.0
    HFS: float


class LegacyV1Scores(BaseModel):
    """Point-based model output, kept for previously stored scores."""

    model_config = ConfigDict(frozen=True)

    model: Literal["legacy_points"] = "legacy_points"
    HFS_version: str = V1_LEGACY
    s1a: float = 0.0
    s1b: float = 0.0
    s2: float = 0.0
    s3a: float = 0.0
    s3b: float = 0.0
    s4: float = 0.0
    s5: float = 0.0
    s6: float = 0.0
    s7: int = 0
    s8: int = 0
    S1: float | None = None
    S2: float | None = None
    s3: float | None = None
    S3: float | None = None
    S4: float | None = None
    S5: float | None = None
    S6: float | None = None
    S7: float | None = None
    S8: float | None = None
    N: float | None = None
    M: float | None = None
    P: float | None = None
    R: float | None = None
    HFSv1: float | None = None


class V2Scores(BaseModel):
    """Saturation-curve benefit model output.

    ``hfs_score`` is left unset: no risk-adjusted composite exists for v2,
    only the ``B_nutr`` benefit index and the individual risk signals.
    """

    model_config = ConfigDict(frozen=True)

    HFS_version: str = V2
    fiber: float
    protein_raw: float
    protein_factor: float
    protein: float
    net_carb_benefit: float
    energy_benefit: float
    hydration: float
    whole_ingredients: float
    B_nutr: float
    S_net_carbs: float
    S_carb_fiber_ratio: float
    S_trans_fat: float
    S_sodium: float
    S_energy_density: float
    additive_contribution: float
    additives: float
    detected_additives: list[str] = Field(default_factory=list)
    hfs_score: float | None = None


V1Slot = Annotated[V1Scores | LegacyV1Scores, Field(discriminator="model")]


class ScoreRecord(BaseModel):
    """Per-version scores stored for a food.

    Slots read from JSON keep their original payload in ``_stored``; dumps
    write that payload back verbatim until the slot is replaced with
    :meth:`with_slot`, so the version that was not recomputed is never
    rewritten.
    """

    model_config = ConfigDict(frozen=True)

    v1: V1Slot | None = None
    v2: V2Scores | None = None

    _stored: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="wrap")
    @classmethod
    def _parse_stored(
        cls, data: Any, handler: ModelWrapValidatorHandler["ScoreRecord"]
    ) -> "ScoreRecord":
        if not isinstance(data, dict):
            return handler(data)
        v1 = data.get("v1")
        if isinstance(v1, dict) and "model" not in v1:
            # untagged blobs: the sigmoid model always wrote HFS
            tag = "sigmoid" if "HFS" in v1 else "legacy_points"
            record = handler({**data, "v1": {**v1, "model": tag}})
        else:
            record = handler(data)
        record._stored = {
            slot: dict(data[slot])
            for slot in ("v1", "v2")
            if isinstance(data.get(slot), dict)
        }
        return record

    @model_serializer(mode="wrap")
    def _dump_stored(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        dumped = handler(self)
        dumped.update(self._stored)
        return dumped

    @classmethod
    def from_json(cls, payload: dict[str, object] | None) -> "ScoreRecord":
        """Parse a stored JSON blob, tolerating empty values."""
        if not payload:
            return cls()
        return cls.model_validate(payload)

    def to_json(self) -> dict[str, object]:
        """Dump populated versions only."""
        dumped = self.model_dump(mode="json")
        return {key: value for key, value in dumped.items() if value is not None}

    def numeric_score(self) -> float:
        """Return the headline score, or -1 when none is available."""
        if isinstance(self.v1, V1Scores):
            return self.v1.HFS
        if isinstance(self.v1, LegacyV1Scores) and self.v1.HFSv1 is not None:
            return self.v1.HFSv1
        if self.v2 is not None and self.v2.hfs_score is not None:
            return self.v2.hfs_score
        return -1

    def with_slot(self, slot: str, scores: "ScoreObject") -> "ScoreRecord":
        """Copy of the record with ``slot`` replaced by fresh scores."""
        record = ScoreRecord(**{"v1": self.v1, "v2": self.v2, slot: scores})
        record._stored = {
            key: value for key, value in self._stored.items() if key != slot
        }
        return record


ScoreObject = V1Scores | LegacyV1Scores | V2Scores


def merge_score_record(
    existing: ScoreRecord | None, version: str, scores: ScoreObject
) -> ScoreRecord:
    """Put freshly computed scores into the record, keeping the other version."""
    current = existing or ScoreRecord()
    if version == V2:
        if not isinstance(scores, V2Scores):
            raise TypeError("v2 scores must be V2Scores")
        return current.with_slot("v2", scores)
    if version in {V1, V1_LEGACY}:
        if isinstance(scores, V2Scores):
            raise TypeError("v1 scores cannot be V2Scores")
        return current.with_slot("v1", scores)
    raise ValueError(f"Unknown score version: {version}")


class ScoreResult(BaseModel):
    """Outcome of a score computation."""

    version: str
    subscores: ScoreObject
    record: ScoreRecord
    warnings: list[str] = Field(default_factory=list)
