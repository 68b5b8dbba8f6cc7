"""
Distribution Pipeline

Turns distribution records into per-token Merkle trees and answers root and
proof queries across tokens.

Key features:
- One tree per token group; a failing group never blocks the others
- Per-token success/failure outcomes in the order the groups were supplied
- Optional thread-pool parallelism across groups (results never depend on
  scheduling)
- Operator lookups canonicalized once per query
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from core.config.runtime import PipelineConfig, RuntimeConfig, get_default_config
from core.merkle.leaf import normalize_address, parse_amount
from core.merkle.standard_tree import StandardMerkleTree
from core.schemas.errors import (
    ErrorCodes,
    LeafNotFoundException,
    RewardsError,
    RewardsException,
    SchemaValidationException,
)
from core.schemas.rewards import (
    DistributionRecord,
    OperatorAddress,
    OperatorReward,
    ProofResult,
    RootResult,
    TokenDistribution,
    TokenId,
    TokenTreeRecord,
    TreeRecordList,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Results
# =============================================================================

@dataclass
class TokenTree:
    """A built or loaded tree and the token it belongs to."""
    token: TokenId
    tree: StandardMerkleTree


@dataclass
class TokenFailure:
    """Why a single token group could not be processed."""
    token: TokenId
    error: RewardsError

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "error": self.error.model_dump(mode="json")}


@dataclass
class TokenOutcome:
    """Per-token result: exactly one of tree / error is set."""
    token: TokenId
    tree: Optional[StandardMerkleTree] = None
    error: Optional[RewardsError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Outcomes for every token group, in supplied order."""
    outcomes: list[TokenOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def trees(self) -> list[TokenTree]:
        return [
            TokenTree(token=outcome.token, tree=outcome.tree)
            for outcome in self.outcomes
            if outcome.tree is not None
        ]

    @property
    def failures(self) -> list[TokenFailure]:
        return [
            TokenFailure(token=outcome.token, error=outcome.error)
            for outcome in self.outcomes
            if outcome.error is not None
        ]


@dataclass
class ProofScan:
    """Proofs for one operator across token trees."""
    operator: OperatorAddress
    proofs: list[ProofResult] = field(default_factory=list)
    missing: list[TokenFailure] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return len(self.proofs) > 0

    @property
    def missing_tokens(self) -> list[TokenId]:
        return [failure.token for failure in self.missing]


# =============================================================================
# Pipeline Class
# =============================================================================

class RewardsPipeline:
    """
    Builds and loads per-token trees with failure isolation.

    Construction errors (MalformedLeaf, EmptyInput, DuplicateLeaf) and load
    errors (CorruptTreeRecord) are captured per token as RewardsError
    models. Anything that is not a RewardsException is a bug and propagates.
    """

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self.config = config or PipelineConfig()

    def build_trees(
        self,
        distribution: DistributionRecord | Sequence[TokenDistribution | dict[str, Any]],
    ) -> BatchResult:
        """
        Build one tree per token group.

        Raises:
            SchemaValidationException: If the input is not shaped like a
                distribution record (per-group problems never raise)
        """
        groups = _as_distribution(distribution)
        tasks = [
            (TokenId(group.token), _build_task(group.operators))
            for group in groups
        ]
        result = self._run(tasks)
        for outcome in result.outcomes:
            if outcome.tree is not None:
                logger.info(
                    "Built tree for token %s: %d leaves, root %s",
                    outcome.token, len(outcome.tree), outcome.tree.root,
                )
        return result

    def load_trees(
        self,
        records: TreeRecordList | Sequence[TokenTreeRecord | dict[str, Any]],
    ) -> BatchResult:
        """
        Reload one serialized tree per token.

        Raises:
            SchemaValidationException: If the input is not a list of
                {token, tree} entries
        """
        items = _as_tree_records(records)
        tasks = [
            (TokenId(item.token), _load_task(item.tree))
            for item in items
        ]
        result = self._run(tasks)
        for outcome in result.outcomes:
            if outcome.tree is not None:
                logger.info(
                    "Loaded tree for token %s: %d leaves, root %s",
                    outcome.token, len(outcome.tree), outcome.tree.root,
                )
        return result

    def _run(self, tasks: list[tuple[TokenId, Callable[[], StandardMerkleTree]]]) -> BatchResult:
        outcomes: list[Optional[TokenOutcome]] = [None] * len(tasks)
        runnable: list[tuple[int, TokenId, Callable[[], StandardMerkleTree]]] = []

        seen: set[str] = set()
        for position, (token, task) in enumerate(tasks):
            if token in seen:
                outcomes[position] = TokenOutcome(
                    token=token,
                    error=RewardsError(
                        code=ErrorCodes.DUPLICATE_TOKEN,
                        message=f"Token {token} appears more than once",
                        details={"position": position},
                    ),
                )
            else:
                seen.add(token)
                runnable.append((position, token, task))

        def execute(item: tuple[int, TokenId, Callable[[], StandardMerkleTree]]) -> TokenOutcome:
            _, token, task = item
            try:
                return TokenOutcome(token=token, tree=task())
            except RewardsException as e:
                return TokenOutcome(token=token, error=e.to_error_model())

        if self.config.parallel and len(runnable) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                finished = list(pool.map(execute, runnable))
        else:
            finished = [execute(item) for item in runnable]

        for (position, _, _), outcome in zip(runnable, finished):
            outcomes[position] = outcome

        result = BatchResult(outcomes=[outcome for outcome in outcomes if outcome is not None])
        for failure in result.failures:
            logger.warning(
                "Token %s failed: [%s] %s",
                failure.token, failure.error.code, failure.error.message,
            )
        return result


def _build_task(rows: list[OperatorReward]) -> Callable[[], StandardMerkleTree]:
    return lambda: StandardMerkleTree.of(rows)


def _load_task(record: dict[str, Any]) -> Callable[[], StandardMerkleTree]:
    return lambda: StandardMerkleTree.load(record)


def _as_distribution(
    distribution: DistributionRecord | Sequence[TokenDistribution | dict[str, Any]],
) -> list[TokenDistribution]:
    if isinstance(distribution, DistributionRecord):
        return list(distribution.root)
    try:
        return DistributionRecord.model_validate(list(distribution)).root
    except PydanticValidationError as e:
        raise _schema_error("distribution", e) from e


def _as_tree_records(
    records: TreeRecordList | Sequence[TokenTreeRecord | dict[str, Any]],
) -> list[TokenTreeRecord]:
    if isinstance(records, TreeRecordList):
        return list(records.root)
    try:
        return TreeRecordList.model_validate(list(records)).root
    except PydanticValidationError as e:
        raise _schema_error("tree record list", e) from e


def _schema_error(what: str, error: PydanticValidationError) -> SchemaValidationException:
    first = error.errors()[0]
    return SchemaValidationException(
        f"Invalid {what}: {first['msg']}",
        field_path=".".join(str(part) for part in first["loc"]),
        details={"error_count": error.error_count()},
    )


# =============================================================================
# Queries
# =============================================================================

def tree_records(trees: Sequence[TokenTree]) -> TreeRecordList:
    """Serialize trees for storage, keeping token order."""
    return TreeRecordList(
        root=[
            TokenTreeRecord(token=item.token, tree=item.tree.dump().to_json_dict())
            for item in trees
        ]
    )


def distribution_from_trees(trees: Sequence[TokenTree]) -> DistributionRecord:
    """Recover the reward rows of each tree, in caller order."""
    return DistributionRecord(
        root=[
            TokenDistribution(
                token=item.token,
                operators=[
                    OperatorReward(operator=value.address, reward=str(value.amount))
                    for _, value in item.tree.entries()
                ],
            )
            for item in trees
        ]
    )


def compute_roots(trees: Sequence[TokenTree]) -> list[RootResult]:
    """Root hash of every tree, in token order."""
    return [RootResult(token=item.token, root=item.tree.root) for item in trees]


def find_proofs(trees: Sequence[TokenTree], operator: str) -> ProofScan:
    """
    Prove every leaf an operator holds, token by token.

    Tokens where the operator holds nothing are listed in ``missing`` with
    a LEAF_NOT_FOUND error; the scan always continues to the next token.

    Raises:
        MalformedLeafException: If the operator address is malformed
    """
    address = normalize_address(operator)
    scan = ProofScan(operator=address)

    for item in trees:
        matches = item.tree.proofs_for_operator(address)
        if not matches:
            scan.missing.append(TokenFailure(
                token=item.token,
                error=LeafNotFoundException(
                    f"Operator {address} is not in token {item.token}",
                    details={"operator": address},
                ).to_error_model(),
            ))
            continue
        for value, proof in matches:
            scan.proofs.append(ProofResult(
                token=item.token,
                operator=value.address,
                reward=str(value.amount),
                proof=proof,
            ))

    logger.info(
        "Proof scan for %s: %d proofs, %d tokens without the operator",
        address, len(scan.proofs), len(scan.missing),
    )
    return scan


def prove_leaf(trees: Sequence[TokenTree], operator: str, reward: Any) -> ProofScan:
    """
    Prove one exact (operator, reward) leaf in every token tree.

    Raises:
        MalformedLeafException: If the operator or reward is malformed
    """
    address = normalize_address(operator)
    amount = parse_amount(reward)
    scan = ProofScan(operator=address)

    for item in trees:
        try:
            proof = item.tree.get_proof((address, amount))
        except LeafNotFoundException as e:
            scan.missing.append(TokenFailure(token=item.token, error=e.to_error_model()))
            continue
        scan.proofs.append(ProofResult(
            token=item.token,
            operator=address,
            reward=str(amount),
            proof=proof,
        ))

    return scan


# =============================================================================
# Factory
# =============================================================================

def create_pipeline(config: RuntimeConfig | None = None) -> RewardsPipeline:
    """Create a pipeline from runtime configuration (defaults when None)."""
    runtime = config or get_default_config()
    return RewardsPipeline(config=runtime.pipeline)
