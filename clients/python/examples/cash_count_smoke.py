from __future__ import annotations

import argparse
import json

from cashup_client_sdk import CashCountSession, load_config, render


def _parse_counts(raw: list[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for item in raw:
        denomination_id, _, units = item.partition("=")
        if not units:
            raise SystemExit(f"Invalid --count {item!r}: expected <denomination>=<units>")
        counts[denomination_id] = int(units)
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Count a till, submit it and drain the offline queue (smoke)")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--store", required=True)
    parser.add_argument("--operator", required=True)
    parser.add_argument("--count", action="append", default=[], help="<denomination>=<units>, repeatable")
    parser.add_argument("--notes", default="")
    parser.add_argument("--drain-only", action="store_true")
    args = parser.parse_args()

    config = load_config(args.env_file)
    session = CashCountSession.from_config(config, operator=args.operator, store=args.store)

    if args.drain_only:
        result = session.coordinator.trigger()
        print(json.dumps({"success": result.success, "message": result.message, "batch_size": result.batch_size}))
        raise SystemExit(0 if result.success else 1)

    session.start()

    for denomination_id, units in _parse_counts(args.count).items():
        session.ledger.set_count(denomination_id, units)
        session.ledger.focus_float(denomination_id)
        session.ledger.focus_borrow(denomination_id)
        session.ledger.focus_returned(denomination_id)

    for denomination in session.ledger.denominations:
        guidance = session.ledger.guidance(denomination.id)
        print(f"{denomination.label:>5}: {render(guidance, denomination.label)}")

    totals = session.totals()
    print(f"Count total: {totals.count_total} float balanced={totals.float_balanced}")

    outcome = session.submit(args.notes)
    if outcome.synced:
        print(f"Submitted {outcome.drain.batch_size} record(s); owed now {json.dumps(outcome.drain.owed)}")
    else:
        print(f"Saved offline as {outcome.record_id}: {outcome.drain.message}")


if __name__ == "__main__":
    main()
