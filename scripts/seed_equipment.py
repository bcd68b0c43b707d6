"""Seed the equipment catalog through the RegisterEquipment command.

Useful before a demo or a load test against a persistent database. Every
record goes through the same admin-only command the API uses, so the
catalog ends up exactly as if an administrator had entered it.

Prerequisites:
    Tables created: python src/manage.py setup-db

Usage:
    # 200 random pieces of equipment
    python scripts/seed_equipment.py --count 200

    # Reproducible catalog
    python scripts/seed_equipment.py --count 50 --seed 7
"""

import argparse
import random
import sys
import time

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")

_SHAPES = {
    "Swings": ["Nest Swing", "Toddler Swing", "Tyre Swing"],
    "Slides": ["Tornado Slide", "Wave Slide", "Tube Slide"],
    "Climbing Equipment": ["Climbing Dome", "Rope Net", "Boulder Wall"],
    "Seesaws": ["Twin Seesaw", "Spring Seesaw"],
    "Merry-Go-Rounds": ["Spinner", "Carousel"],
    "Spring Riders": ["Horse Rider", "Bike Rider"],
    "Playhouses": ["Cottage", "Castle Fort"],
}


def main():
    parser = argparse.ArgumentParser(
        description="Seed the equipment catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --count 200             # Random catalog
  %(prog)s --count 50 --seed 7     # Same catalog every run
        """,
    )
    parser.add_argument("--count", type=int, default=100, help="Pieces of equipment to register (default: 100)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible catalog")
    parser.add_argument("--batch-size", type=int, default=25, help="Print progress every N records (default: 25)")
    args = parser.parse_args()

    from protean.exceptions import ValidationError

    from playground.domain import playground
    from playground.equipment.registration import RegisterEquipment

    rng = random.Random(args.seed)

    print(f"\n{'='*60}")
    print("  Playground Equipment Seeder")
    print(f"{'='*60}")
    print(f"  Equipment to register: {args.count:,}")
    print(f"  Batch report every:    {args.batch_size:,} records")
    print(f"{'='*60}\n")

    success = 0
    errors = 0
    start = time.monotonic()

    playground.init()
    with playground.domain_context():
        for i in range(args.count):
            category = rng.choice(list(_SHAPES))
            try:
                playground.process(
                    RegisterEquipment(
                        actor_id="seed-admin",
                        actor_role="admin",
                        name=f"{rng.choice(_SHAPES[category])} {i + 1:04d}",
                        category=category,
                        price=round(rng.uniform(4000, 60000), 2),
                        stock=rng.randint(0, 40),
                        installation_time_days=rng.randint(1, 3),
                    ),
                    asynchronous=False,
                )
                success += 1
            except ValidationError as e:
                errors += 1
                if errors <= 5:
                    print(f"  [ERROR] Record {i+1}: {e}")
                elif errors == 6:
                    print("  [ERROR] Suppressing further error messages...")

            if (i + 1) % args.batch_size == 0:
                elapsed = time.monotonic() - start
                rate = (i + 1) / elapsed
                print(
                    f"  [{time.strftime('%H:%M:%S')}] Registered {i+1:,}/{args.count:,} "
                    f"({rate:.1f} rec/sec, {errors} errors)"
                )

    elapsed = time.monotonic() - start

    print(f"\n{'='*60}")
    print("  Seeding Complete")
    print(f"{'='*60}")
    print(f"  Total time:   {elapsed:.1f}s")
    print(f"  Succeeded:    {success:,}")
    print(f"  Errors:       {errors:,}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    main()
