"""
Pagewise Quick Start Example

A simple example to get you started with Pagewise in 5 minutes.

Features covered:
- Page sources
- Starting a pager
- Scrolling with anchor reports
- Bounded windows
- Retry and refresh

Run with: python example_quickstart.py
"""

import asyncio

from pagewise import (
    LoadDirection,
    Pager,
    PagingConfig,
    Placeholder,
    TransientLoadError,
    enable_tracing,
    get_events,
    user_source,
)


# ============================================================================
# 1. DEFINE YOUR SOURCE
# ============================================================================


class FlakyUsers:
    """User source that fails the first time page 3 is requested."""

    def __init__(self):
        self.source = user_source(page_size=20, latency=0.05)
        self.failed = False

    def get_refresh_key(self, state):
        return self.source.get_refresh_key(state)

    async def load(self, request):
        if request.key == 3 and not self.failed:
            self.failed = True
            raise TransientLoadError("Backend timed out")
        return await self.source.load(request)


def describe(snapshot):
    loaded = snapshot.loaded_items
    markers = sum(isinstance(item, Placeholder) for item in snapshot.items)
    first = loaded[0] if loaded else "-"
    last = loaded[-1] if loaded else "-"
    return f"{len(loaded)} items ({first} .. {last}), {markers} placeholders"


# ============================================================================
# 2. ASYNC MAIN FUNCTION
# ============================================================================


async def main():
    """Run the quickstart example."""

    enable_tracing(slow_load_ms=500.0, capture_events=True)
    config = PagingConfig(page_size=20, initial_key=1, max_retained_items=60)

    async with Pager(FlakyUsers(), config) as pager:
        # ====== INITIAL LOAD ======
        print("1️⃣  START - Loading the first page")
        await pager.wait_idle()
        print(f"   {describe(pager.snapshot)}")

        # ====== SCROLL DOWN ======
        print("\n2️⃣  SCROLL - Anchor near the end of the list")
        pager.report_anchor(len(pager.snapshot) - 2)
        await pager.wait_idle()
        print(f"   {describe(pager.snapshot)}")

        # ====== FAILURE ======
        print("\n3️⃣  FAILURE - Page 3 times out")
        pager.report_anchor(len(pager.snapshot) - 2)
        await pager.wait_idle()
        append = pager.load_states.append
        print(f"   Append state: {append.status.value} ({append.error_kind.value})")

        # ====== RETRY ======
        print("\n4️⃣  RETRY - Re-issue the failed request")
        pager.retry(LoadDirection.APPEND)
        await pager.wait_idle()
        print(f"   {describe(pager.snapshot)}")

        # ====== EVICTION ======
        print("\n5️⃣  EVICT - Keep scrolling past the retention limit")
        for _ in range(3):
            pager.report_anchor(len(pager.snapshot) - 2)
            await pager.wait_idle()
        print(f"   {describe(pager.snapshot)}")

        # ====== REFRESH ======
        print("\n6️⃣  REFRESH - Reload around the anchor")
        pager.refresh()
        await pager.wait_idle()
        print(f"   {describe(pager.snapshot)}")

    print(f"\n✅ {len(get_events())} loads traced")


# ============================================================================
# 3. RUN THE EXAMPLE
# ============================================================================

if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("PAGEWISE QUICKSTART EXAMPLE")
    print("=" * 60 + "\n")

    asyncio.run(main())
