"""Route pricing: chain vault quotes hop by hop along a path."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import structlog

from dexterity.errors import QuoteFailedError
from dexterity.opcode import Opcode
from dexterity.routing.types import Hop, HopQuote, Path, Route
from dexterity.vaults.base import SwapQuote

if TYPE_CHECKING:
    from dexterity.models.tokens import Token
    from dexterity.routing.graph import RouteGraph
    from dexterity.stats import RoutingStats
    from dexterity.vaults.base import Vault

logger = structlog.get_logger()


class RouteEvaluator:
    """Prices candidate paths against the vaults in a RouteGraph.

    Hops are quoted strictly in sequence, since each hop's input is the
    previous hop's output. When a hop has several candidate vaults they are
    quoted concurrently and the largest output wins (first discovered on a
    tie).
    """

    def __init__(self, graph: RouteGraph, stats: RoutingStats | None = None) -> None:
        self._graph = graph
        self._stats = stats

    async def evaluate_route(
        self,
        path: Path,
        amount_in: int,
        deadline: float | None = None,
        semaphore: asyncio.Semaphore | None = None,
        stats: RoutingStats | None = None,
    ) -> Route:
        """Price a path for an exact input amount.

        Args:
            path: Candidate path; pinned vaults are used as-is, otherwise the
                best parallel vault is chosen at each hop
            amount_in: Exact input amount for the first hop
            deadline: Event loop time after which pending quotes fail
            semaphore: Optional bound on concurrent quote calls
            stats: Counters for this call (defaults to the evaluator's own)

        Returns:
            Route satisfying the amount chaining invariant

        Raises:
            QuoteFailedError: If any hop has no vault that returned a usable quote
        """
        if len(path.tokens) < 2:
            raise QuoteFailedError("Path must contain at least two tokens")

        counters = stats if stats is not None else self._stats
        hops: list[Hop] = []
        used_vaults: set[str] = set()
        current_amount = amount_in

        for i in range(path.hop_count):
            token_in = path.tokens[i]
            token_out = path.tokens[i + 1]
            candidates = self._candidates(path, i, used_vaults)
            if not candidates:
                raise QuoteFailedError(
                    f"No unused vault connects {token_in.contract_id} to {token_out.contract_id}",
                    hop_index=i,
                )

            results = await asyncio.gather(
                *(
                    self._quote_hop(
                        vault, token_in, current_amount, i, deadline, semaphore, counters
                    )
                    for vault in candidates
                ),
                return_exceptions=True,
            )

            best: tuple[Vault, Opcode, SwapQuote] | None = None
            last_error: BaseException | None = None
            for vault, result in zip(candidates, results, strict=True):
                if isinstance(result, BaseException):
                    if not isinstance(result, QuoteFailedError):
                        raise result
                    last_error = result
                    continue
                opcode, quote = result
                if best is None or quote.amount_out > best[2].amount_out:
                    best = (vault, opcode, quote)

            if best is None:
                raise QuoteFailedError(
                    f"All {len(candidates)} vault(s) failed at hop {i}: {last_error}",
                    vault_id=candidates[0].contract_id if len(candidates) == 1 else None,
                    hop_index=i,
                )

            vault, opcode, quote = best
            used_vaults.add(vault.contract_id)
            hops.append(
                Hop(
                    vault=vault,
                    opcode=opcode,
                    token_in=token_in,
                    token_out=token_out,
                    quote=HopQuote(
                        amount_in=current_amount,
                        amount_out=quote.amount_out,
                        minimum_received=quote.minimum_received,
                    ),
                    fee=quote.fee,
                )
            )
            current_amount = quote.amount_out

        if counters is not None:
            counters.increment_routes_evaluated()

        logger.debug(
            "route_evaluated",
            path=path.token_ids,
            vaults=[hop.vault.contract_id for hop in hops],
            amount_in=amount_in,
            amount_out=current_amount,
        )
        return Route(
            path=list(path.tokens),
            hops=hops,
            amount_in=amount_in,
            amount_out=current_amount,
            discovery_index=path.discovery_index,
        )

    def _candidates(self, path: Path, hop_index: int, used_vaults: set[str]) -> list[Vault]:
        if path.vaults is not None:
            return [path.vaults[hop_index]]
        edges = self._graph.edges_between(
            path.tokens[hop_index].contract_id, path.tokens[hop_index + 1].contract_id
        )
        return [edge.vault for edge in edges if edge.vault.contract_id not in used_vaults]

    async def _quote_hop(
        self,
        vault: Vault,
        token_in: Token,
        amount: int,
        hop_index: int,
        deadline: float | None,
        semaphore: asyncio.Semaphore | None,
        stats: RoutingStats | None = None,
    ) -> tuple[Opcode, SwapQuote]:
        """Quote one vault for one hop, converting every failure to QuoteFailedError."""
        token_a, _ = vault.get_legs()
        opcode = Opcode.for_swap(token_in.contract_id, token_a.contract_id)
        vault_id = vault.contract_id

        if stats is not None:
            stats.increment_quotes_requested()

        timeout: float | None = None
        if deadline is not None:
            timeout = deadline - asyncio.get_running_loop().time()
            if timeout <= 0:
                self._record_failure(stats, vault_id, hop_index, "deadline_exceeded")
                raise QuoteFailedError(
                    f"Deadline exceeded before quoting {vault_id}",
                    vault_id=vault_id,
                    hop_index=hop_index,
                )

        try:
            result = await asyncio.wait_for(
                self._guarded_quote(vault, amount, opcode, semaphore), timeout
            )
        except TimeoutError as e:
            self._record_failure(stats, vault_id, hop_index, "timeout")
            raise QuoteFailedError(
                f"Quote from {vault_id} timed out", vault_id=vault_id, hop_index=hop_index
            ) from e
        except QuoteFailedError as e:
            self._record_failure(stats, vault_id, hop_index, str(e))
            raise QuoteFailedError(str(e), vault_id=vault_id, hop_index=hop_index) from e
        except Exception as e:
            self._record_failure(stats, vault_id, hop_index, str(e))
            raise QuoteFailedError(
                f"Quote from {vault_id} raised {type(e).__name__}: {e}",
                vault_id=vault_id,
                hop_index=hop_index,
            ) from e

        if isinstance(result, BaseException):
            self._record_failure(stats, vault_id, hop_index, str(result))
            raise QuoteFailedError(
                f"Quote from {vault_id} returned an error: {result}",
                vault_id=vault_id,
                hop_index=hop_index,
            ) from result
        if result.amount_out <= 0:
            self._record_failure(stats, vault_id, hop_index, "zero_output")
            raise QuoteFailedError(
                f"Quote from {vault_id} produced no output",
                vault_id=vault_id,
                hop_index=hop_index,
            )
        return opcode, result

    @staticmethod
    async def _guarded_quote(
        vault: Vault,
        amount: int,
        opcode: Opcode,
        semaphore: asyncio.Semaphore | None,
    ) -> SwapQuote | BaseException:
        guard = semaphore if semaphore is not None else contextlib.nullcontext()
        async with guard:
            return await vault.quote(amount, opcode)

    @staticmethod
    def _record_failure(
        stats: RoutingStats | None, vault_id: str, hop_index: int, reason: str
    ) -> None:
        if stats is not None:
            stats.increment_quotes_failed()
        logger.debug("quote_failed", vault=vault_id, hop=hop_index, reason=reason)


__all__ = ["RouteEvaluator"]
