from app.core.database import Base, SessionLocal, engine
from app.moderation.db import seed_chat_rules


def reset_database():
    print("Dropping all MindCare tables...")
    Base.metadata.drop_all(bind=engine)

    print("Recreating tables...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        added = seed_chat_rules(db)
    finally:
        db.close()
    print(f"Tables recreated, {added} community guidelines seeded.")


if __name__ == "__main__":
    reset_database()
