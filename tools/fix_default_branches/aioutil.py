from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
import ssl
from typing import Any, Generic, TypeVar

import anyio
import httpx

from .logging import log
from .util import exp_wait

InT = TypeVar("InT")
OutT = TypeVar("OutT")


async def arequest(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    retry: bool = True,
    **kwargs: Any,
) -> httpx.Response:
    """
    Perform an HTTP request and raise on an error status.  When ``retry`` is
    true, connection errors and 5xx responses are retried a few times with
    exponential backoff (see `exp_wait()`) before the last error is raised;
    otherwise the request is made exactly once.
    """
    waits = exp_wait()
    kwargs.setdefault("timeout", 60)
    while True:
        try:
            r = await client.request(method, url, follow_redirects=True, **kwargs)
            r.raise_for_status()
        except (httpx.HTTPError, ssl.SSLError) as e:
            if retry and (
                isinstance(e, (httpx.RequestError, ssl.SSLError))
                or (
                    isinstance(e, httpx.HTTPStatusError)
                    and e.response.status_code >= 500
                )
            ):
                try:
                    delay = next(waits)
                except StopIteration:
                    raise e
                log.warning(
                    "Retrying %s request to %s in %f seconds as it raised %s: %s",
                    method.upper(),
                    url,
                    delay,
                    type(e).__name__,
                    str(e),
                )
                await anyio.sleep(delay)
                continue
            else:
                raise
        return r


@dataclass
class SettledReport(Generic[InT, OutT]):
    results: list[tuple[InT, OutT]] = field(default_factory=list)
    failed: list[tuple[InT, Exception]] = field(default_factory=list)


async def amap_settled(
    func: Callable[[InT], Awaitable[OutT]], inputs: Iterable[InT]
) -> SettledReport[InT, OutT]:
    """
    Run ``func`` on every input concurrently, with no limit on how many run
    at once, and wait for all of them to finish.  An exception raised for
    one input is recorded in the report's ``failed`` list and does not
    affect any other input.
    """
    report: SettledReport[InT, OutT] = SettledReport()

    async def dowork(inp: InT) -> None:
        try:
            outp = await func(inp)
        except Exception as e:
            log.debug("Job failed on input %r:", inp, exc_info=True)
            report.failed.append((inp, e))
        else:
            report.results.append((inp, outp))

    async with anyio.create_task_group() as tg:
        for inp in inputs:
            tg.start_soon(dowork, inp)
    return report
