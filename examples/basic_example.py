"""
Basic example of tracking seeders with sqlalchemy-seed-ledger.

A seeding runner asks the ledger which seeds already ran, runs the rest
under the next batch number and logs them. Rolling back walks the last
batch in reverse seed order.
"""

from sqlalchemy import Column, Integer, MetaData, String, Table, delete, insert

from seed_ledger import ConnectionResolver, SeedLedger

resolver = ConnectionResolver({"default": "sqlite:///example.db"})
engine = resolver.connection()

metadata = MetaData()
users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("username", String(50), unique=True, nullable=False),
)
metadata.create_all(engine)


def seed_admin(connection):
    connection.execute(insert(users).values(username="admin"))


def unseed_admin(connection):
    connection.execute(delete(users).where(users.c.username == "admin"))


def seed_demo_users(connection):
    connection.execute(insert(users), [{"username": f"demo{i}"} for i in range(3)])


def unseed_demo_users(connection):
    connection.execute(delete(users).where(users.c.username.like("demo%")))


SEEDS = {
    "2024_01_01_000000_AdminSeeder": (seed_admin, unseed_admin),
    "2024_01_02_000000_DemoUsersSeeder": (seed_demo_users, unseed_demo_users),
}


def run(ledger: SeedLedger) -> None:
    ran = set(ledger.get_ran())
    pending = [name for name in sorted(SEEDS) if name not in ran]

    if not pending:
        print(f"Nothing to seed in {ledger.get_env()}")
        return

    batch = ledger.get_next_batch_number()
    for name in pending:
        with engine.begin() as connection:
            SEEDS[name][0](connection)
        ledger.log(name, batch)
        print(f"Seeded: {name} (batch {batch})")


def rollback(ledger: SeedLedger) -> None:
    for record in ledger.get_last():
        with engine.begin() as connection:
            SEEDS[record.seed][1](connection)
        ledger.delete(record)
        print(f"Rolled back: {record.seed}")


def main():
    ledger = SeedLedger(resolver, "seeds", "development")
    if not ledger.repository_exists():
        ledger.create_repository()

    run(ledger)
    run(ledger)

    rollback(ledger)
    print(f"Still ran in development: {ledger.get_ran()}")

    resolver.dispose()


if __name__ == "__main__":
    main()
