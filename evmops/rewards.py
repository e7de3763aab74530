"""
evmops.rewards — miner and uncle rewards for one block.

The base reward comes from the network's fork schedule: the last fork whose
activation block is ≤ the block number wins. When the block includes uncles
the base reward is raised with

    reward += (reward // uncle_reward_multiplier) * reward

which is kept exactly as deployed (downstream balances depend on it), even
though it is far larger than the protocol's 1/32-per-uncle inclusion bonus.

Each uncle author then receives

    (uncle_number + max_uncle_depth - block_number) * (reward // max_uncle_depth)

computed from the raised reward. Operations are credits with status SUCCESS:
one MINER_REWARD to the block author at index 0, then one UNCLE_REWARD per uncle.
The caller passes one header per uncle hash the block lists; a missing header,
or an uncle without author or number, aborts the whole computation.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from normcore.address import AddressFormatter
from normcore.config import NetworkConfig
from normcore.errors import IntegrityMismatch, PreconditionMissing, require
from normcore.types import Amount, Operation, OperationStatus, Transaction

from .types import MINING_REWARD_OP_TYPE, UNCLE_REWARD_OP_TYPE, Block, Uncle

log = logging.getLogger(__name__)


def mining_reward(number: int, *, has_uncles: bool, config: NetworkConfig) -> int:
    """Base reward at `number`, raised when the block includes uncles."""
    reward = config.fork_schedule.reward_at(number)
    if has_uncles:
        reward += (reward // config.uncle_reward_multiplier) * reward
    return reward


def uncle_reward(uncle_number: int, block_number: int, reward: int, *, config: NetworkConfig) -> int:
    depth = config.max_uncle_depth
    distance = uncle_number + depth - block_number
    if distance < 0:
        raise IntegrityMismatch(
            "uncle is deeper than the maximum uncle depth",
            expected=f">={block_number - depth}",
            actual=str(uncle_number),
            data={"max_uncle_depth": depth},
        )
    return distance * (reward // depth)


def build_block_reward_operations(
    block: Block,
    uncles: Sequence[Uncle],
    *,
    config: NetworkConfig,
    format_address: AddressFormatter,
) -> List[Operation]:
    """
    Build the reward operations for `block`.

    Args:
        block: the block header (number and author are required)
        uncles: uncle headers in the order the block lists them

    Raises:
        PreconditionMissing for a missing block number/author, a listed uncle
        without a header, or an uncle without author/number.
        IntegrityMismatch for more headers than listed uncles or an uncle
        deeper than `max_uncle_depth`.
    """
    number = require(block.number, "missing block number", field="number")
    miner = require(block.author, "block has no author", field="author")
    currency = config.currency

    if len(uncles) < len(block.uncles):
        raise PreconditionMissing(
            f"block lists {len(block.uncles)} uncles, {len(uncles)} headers given",
            field="uncles",
        )
    if len(uncles) > len(block.uncles):
        raise IntegrityMismatch(
            "more uncle headers than the block lists",
            expected=str(len(block.uncles)),
            actual=str(len(uncles)),
        )

    reward = mining_reward(number, has_uncles=bool(block.uncles), config=config)
    ops: List[Operation] = [
        Operation(
            index=0,
            kind=MINING_REWARD_OP_TYPE,
            status=OperationStatus.SUCCESS,
            account=format_address(miner),
            amount=Amount.credit(reward, currency),
        )
    ]

    for uncle in uncles:
        uncle_miner = require(uncle.author, "uncle block has no author", field="uncle.author")
        uncle_number = require(uncle.number, "uncle block has no number", field="uncle.number")
        ops.append(
            Operation(
                index=len(ops),
                kind=UNCLE_REWARD_OP_TYPE,
                status=OperationStatus.SUCCESS,
                account=format_address(uncle_miner),
                amount=Amount.credit(
                    uncle_reward(uncle_number, number, reward, config=config), currency
                ),
            )
        )

    log.debug(
        "block reward operations built",
        extra={
            "number": number,
            "fork": config.fork_schedule.active_fork(number).name,
            "reward": reward,
            "uncles": len(uncles),
        },
    )
    return ops


def build_block_reward_transaction(
    block: Block,
    uncles: Sequence[Uncle],
    *,
    config: NetworkConfig,
    format_address: AddressFormatter,
) -> Transaction:
    """Wrap the reward operations in a transaction identified by the block hash."""
    block_hash = require(block.hash, "missing block hash", field="hash")
    ops = build_block_reward_operations(
        block, uncles, config=config, format_address=format_address
    )
    return Transaction(hash=block_hash.hex(), operations=tuple(ops))


__all__ = [
    "mining_reward",
    "uncle_reward",
    "build_block_reward_operations",
    "build_block_reward_transaction",
]
