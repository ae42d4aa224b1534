"""
Ajoute une œuvre depuis la ligne de commande via l'API admin.

Usage:
    python scripts/upload_artwork.py IMAGE --title "Untitled" --year 2025 \
        --medium "Oil on canvas" --size "50 x 50 cm" [--featured]

Les identifiants admin sont lus dans ADMIN_USERNAME / ADMIN_PASSWORD et
l'URL de l'API dans PORTFOLIO_API_URL.
"""
import argparse
import asyncio
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

load_dotenv()

from portfolio.client import (
    ArtworkUploadForm,
    ImageFile,
    PortfolioClientError,
    RemoteDataClient,
    SessionState,
    ValidationError,
)
from portfolio.client.remote import API_URL


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Upload an artwork to the portfolio")
    parser.add_argument("image", help="Chemin de l'image")
    parser.add_argument("--title", required=True)
    parser.add_argument("--year", required=True)
    parser.add_argument("--medium", required=True)
    parser.add_argument("--size", required=True)
    parser.add_argument("--description", default="")
    parser.add_argument("--availability", default="available",
                        choices=["available", "sold", "not-for-sale"])
    parser.add_argument("--tags", default="")
    parser.add_argument("--featured", action="store_true")
    parser.add_argument("--api-url", default=API_URL)
    return parser.parse_args(argv)


async def upload(args) -> int:
    username = os.getenv("ADMIN_USERNAME", "admin")
    password = os.getenv("ADMIN_PASSWORD", "")

    async with RemoteDataClient(base_url=args.api_url) as client:
        session = SessionState()
        if not await session.login(client, username, password):
            print("❌ Identifiants admin refusés")
            return 1

        form = ArtworkUploadForm(client, notify=lambda n: print(f"[{n.title}] {n.description}"))
        try:
            form.select_file(ImageFile.from_path(args.image))
            created = await form.submit({
                "title": args.title,
                "year": args.year,
                "medium": args.medium,
                "size": args.size,
                "description": args.description,
                "availability": args.availability,
                "tags": args.tags,
                "featured": args.featured,
            })
        except ValidationError as e:
            for field, message in e.errors.items():
                print(f"  - {field}: {message}")
            return 1
        except PortfolioClientError:
            # déjà affiché par la notification
            return 1
        finally:
            await session.logout(client)

        print(f"✅ Œuvre créée: {created['id']} -> {created['imageUrl']}")
        return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(upload(parse_args())))
