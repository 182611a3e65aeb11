import asyncio
import logging

from neuroblog.config import get_settings
from neuroblog.database import Base, SessionLocal, engine
from neuroblog.services.container import build_container

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


async def run(batch: bool) -> None:
    container = build_container(get_settings(), SessionLocal)
    db = SessionLocal()
    try:
        if batch:
            created = await container.pipeline.generate_batch(db)
            print(f"generated {len(created)} suggestions")
        else:
            s = await container.pipeline.run_scheduled_tick(db)
            print(f"generated: {s.title}" if s else "nothing generated")
    finally:
        db.close()


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Run one suggestion generation pass")
    parser.add_argument("--batch", action="store_true", help="full batch instead of a single scheduled tick")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    asyncio.run(run(args.batch))

if __name__ == "__main__":
    main()
