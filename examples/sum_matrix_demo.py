#!/usr/bin/env python3
"""Deferred Matrix Summation: watch row tasks, the deferred join, and a rejection.

================================================================================
WHY THIS EXAMPLE?
================================================================================

``sum_matrix`` returns a future straight away.  Nothing is added until the
event loop gets a turn: every row task yields once before summing, and the
join yields once more before collecting the row totals.  Running with DEBUG
logging shows the interleaving::

    matrix_sum.called            (run 1)
    matrix_sum.called            (run 2)
    matrix_sum.rejected          (run 2, empty matrix, failed on return)
    row_sum.add row=0 value=1
    ...
    row_sum.computed row=2 total=24
    matrix_sum.completed total=45

================================================================================
EXAMPLE USAGE
================================================================================

Run this example:
    python examples/sum_matrix_demo.py

See Also:
    - :mod:`gridsum.execution.matrix_summer`: MatrixSummer, sum_matrix
    - :mod:`gridsum.execution.scheduler`: the deferral seam
"""
import asyncio

from gridsum import EmptyMatrixError, MatrixSummer, configure_logging


async def run_demo() -> None:
    summer = MatrixSummer()

    matrix = [
        [1, 2, 3],
        [4, 5, 6],
        [7, 8, 9],
    ]

    # === 1. Submit both, before the loop gets a turn ===
    print("\n[1] Submit")
    run_1 = summer.submit(matrix)
    print(f"  run 1: state={run_1.state.value} done={run_1.future.done()}")

    run_2 = summer.submit([])
    print(f"  run 2: state={run_2.state.value} done={run_2.future.done()}")

    # === 2. Await the results ===
    print("\n[2] Results")
    try:
        total = await run_1.future
        print(f"  run 1 total: {total}")
        print(f"  row totals: {[row.total for row in run_1.result.rows]}")
    except Exception as exc:
        print(f"  run 1 error: {exc}")

    try:
        await run_2.future
    except EmptyMatrixError as exc:
        print(f"  run 2 rejected: {exc}")

    # === 3. State history ===
    print("\n[3] State history")
    print(f"  run 1: {' → '.join(state.value for state in run_1.history)}")
    print(f"  run 2: {' → '.join(state.value for state in run_2.history)}")


def main():
    configure_logging(level="DEBUG", json_format=False)

    print("=" * 60)
    print("Deferred Matrix Summation")
    print("=" * 60)

    asyncio.run(run_demo())

    print("\n" + "=" * 60)
    print("[OK] Deferred Matrix Summation Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
