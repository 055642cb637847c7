import asyncio
import time

from hooktrace.boot import bootstrap, read_terminal_and_invoke
from hooktrace.core.core import component, hooks
from hooktrace.core.hook import HookContext
from hooktrace.input.bus import InputBus
from hooktrace.tracking import tracked


WORDS = ["apple", "apricot", "banana", "blueberry", "cherry", "grape", "melon"]


@component
def Results(query: str):
    matches, set_matches = tracked.use_state(list, name="matches")
    summary, set_summary = tracked.use_state("", name="summary")

    # effect -> set_state -> effect: a two-step cascade on every query change
    tracked.use_effect(
        lambda: set_matches([w for w in WORDS if w.startswith(query)]),
        [query],
        names=["query"],
    )
    tracked.use_effect(
        lambda: set_summary(f"{len(matches)} match(es) for {query!r}"),
        [matches],
        names=["matches"],
    )

    def _slow_highlight():
        time.sleep(0.012)  # pretend to measure layout

    tracked.use_layout_effect(_slow_highlight, [summary], names=["summary"])
    tracked.use_effect(lambda: print(summary) if summary else None, [summary], names=["summary"])
    return []


@component
def Boot():
    query, set_query = tracked.use_state("", name="query")

    def _subscribe():
        bus = HookContext.get_service("input_bus", InputBus)

        def _on_event(ev):
            if ev.get("type") == "submit":
                set_query(ev.get("value", "").strip().lower())

        return bus.subscribe(_on_event)

    hooks.use_effect(_subscribe, [])
    return [Results(key="results", query=query)]


async def main():
    myapp = bootstrap(Boot, fps=20)
    await read_terminal_and_invoke(myapp, prompt="> ", wait=True)


if __name__ == "__main__":
    asyncio.run(main())
