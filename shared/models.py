"""
FlowerEngine Pydantic Models

Data models for the node metadata document published on the Hive account,
the benchmark report rows it carries, and the results of node selection.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Optional, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
)
import structlog

logger = structlog.get_logger()


# =============================================================================
# Report Models
# =============================================================================

def _none_if_invalid(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Turn a value of the wrong type into None instead of failing the row."""
    try:
        return handler(value)
    except ValidationError:
        return None


# Benchmark flags must be JSON booleans and figures JSON numbers; anything
# else reads as absent.
Flag = Annotated[Optional[StrictBool], WrapValidator(_none_if_invalid)]
Number = Annotated[Optional[Union[StrictInt, StrictFloat]], WrapValidator(_none_if_invalid)]
Text = Annotated[Optional[StrictStr], WrapValidator(_none_if_invalid)]


class NodeBenchmark(BaseModel):
    """Result of one benchmark (token, contract, account_history) for a node."""
    model_config = ConfigDict(extra="allow")

    ok: Flag = None
    count: Number = None
    time: Number = None
    rank: Number = None


class NodeConfig(BaseModel):
    """Result of the config benchmark for a node."""
    model_config = ConfigDict(extra="allow")

    ok: Flag = None
    time: Number = None
    access_time: Number = None
    rank: Number = None


class NodeLatency(BaseModel):
    """Result of the latency benchmark for a node."""
    model_config = ConfigDict(extra="allow")

    ok: Flag = None
    min_latency: Number = None
    max_latency: Number = None
    avg_latency: Number = None
    time: Number = None
    rank: Number = None
    # Not part of the published report format, honoured when present
    ms: Number = None

    @property
    def latency_ms(self) -> Optional[float]:
        """Latency figure in milliseconds: `ms` if set, else `avg_latency`."""
        if self.ms is not None:
            return self.ms
        return self.avg_latency


class NodeReport(BaseModel):
    """One benchmarked node from the published report."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    node: StrictStr
    ssc_node_version: Text = Field(default=None, alias="SSCnodeVersion")
    engine: Flag = None
    token: Annotated[Optional[NodeBenchmark], WrapValidator(_none_if_invalid)] = None
    contract: Annotated[Optional[NodeBenchmark], WrapValidator(_none_if_invalid)] = None
    account_history: Annotated[Optional[NodeBenchmark], WrapValidator(_none_if_invalid)] = None
    config: Annotated[Optional[NodeConfig], WrapValidator(_none_if_invalid)] = None
    latency: Annotated[Optional[NodeLatency], WrapValidator(_none_if_invalid)] = None
    weighted_score: Number = None
    tests_completed: Number = None


class WeightedScoring(BaseModel):
    """Weights applied by the benchmark script to compute weighted_score."""
    model_config = ConfigDict(extra="allow")

    weights: dict[str, float] = Field(default_factory=dict)
    description: Optional[str] = None


class ReportParameters(BaseModel):
    """Provenance of the benchmark run that produced the report."""
    model_config = ConfigDict(extra="allow")

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[float] = None
    timestamp: Optional[str] = None
    nectar_engine_version: Optional[str] = None
    script_version: Optional[str] = None
    num_retries: Optional[int] = None
    num_retries_call: Optional[int] = None
    timeout: Optional[float] = None
    threading: Optional[bool] = None
    seconds: Optional[float] = None
    account_name: Optional[str] = None
    token: Optional[str] = None
    contract: Optional[str] = None
    benchmarks: dict[str, Any] = Field(default_factory=dict)
    weighted_scoring: Optional[WeightedScoring] = None


# =============================================================================
# Metadata Document
# =============================================================================

class NodeMetadataDocument(BaseModel):
    """
    JSON metadata published on the node list account.

    Only `nodes` and `failing_nodes` are required; failure reasons are kept
    as published. A missing or malformed `report` never fails validation:
    a non-list becomes None, and only rows that are not objects or lack a
    `node` URL are dropped. Report fields of the wrong JSON type read as
    None. `parameter` is kept as published.
    """
    nodes: list[str]
    failing_nodes: dict[str, Any]
    report: Optional[list[NodeReport]] = None
    parameter: Any = None

    @field_validator("report", mode="before")
    @classmethod
    def _lenient_report(cls, value: Any) -> Optional[list]:
        if not isinstance(value, list):
            if value is not None:
                logger.warning("report_not_a_list", type=type(value).__name__)
            return None

        rows = []
        for index, row in enumerate(value):
            try:
                rows.append(NodeReport.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    "report_row_dropped",
                    index=index,
                    errors=e.error_count()
                )
        return rows

    @property
    def parameters(self) -> Optional[ReportParameters]:
        """Typed view of `parameter`, None when it does not parse."""
        if not isinstance(self.parameter, dict):
            return None
        try:
            return ReportParameters.model_validate(self.parameter)
        except ValidationError:
            return None


# =============================================================================
# Account Models
# =============================================================================

class AccountRecord(BaseModel):
    """Subset of a Hive account record needed to read node metadata."""
    model_config = ConfigDict(extra="ignore")

    name: str
    json_metadata: Optional[str] = None


class TokenInfo(BaseModel):
    """Row of the Hive-Engine `tokens` table."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[int] = Field(default=None, alias="_id")
    issuer: str
    symbol: str
    name: str
    metadata: Optional[str] = None
    precision: int = 0
    max_supply: Optional[str] = Field(default=None, alias="maxSupply")
    supply: Optional[str] = None
    circulating_supply: Optional[str] = Field(default=None, alias="circulatingSupply")
    staking_enabled: bool = Field(default=False, alias="stakingEnabled")
    unstaking_cooldown: Optional[int] = Field(default=None, alias="unstakingCooldown")
    delegation_enabled: bool = Field(default=False, alias="delegationEnabled")
    undelegation_cooldown: Optional[int] = Field(default=None, alias="undelegationCooldown")


# =============================================================================
# Selection Results
# =============================================================================

class NoNodeReason(str, Enum):
    """Why a selection produced no node."""
    NO_AVAILABLE_NODES = "no_available_nodes"  # every listed node is failing
    NO_REPORT = "no_report"                    # report missing or empty
    NO_ENGINE_NODES = "no_engine_nodes"        # no report row with engine=true


@dataclass(frozen=True)
class NodeSelection:
    """
    Outcome of a selection policy.

    Either `node` is set, or `reason` says why nothing was recommended.
    `fallback` marks a node picked without a confirmed health signal.
    """
    node: Optional[str] = None
    reason: Optional[NoNodeReason] = None
    fallback: bool = False

    def __bool__(self) -> bool:
        return self.node is not None

    @classmethod
    def empty(cls, reason: NoNodeReason) -> "NodeSelection":
        return cls(node=None, reason=reason)


class NodeListing(BaseModel):
    """Active and failing nodes as published, without report filtering."""
    active: list[str] = Field(default_factory=list)
    failing: dict[str, Any] = Field(default_factory=dict)
