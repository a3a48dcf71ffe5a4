import argparse
import asyncio
import sys

from restora_client import constants, render
from restora_client.client import RestoraClient
from restora_client.logger import logger
from restora_client.remote import RemoteAccessLayer
from restora_client.scheduler import SyncScheduler
from restora_client.storage import FileStorage

renderers = {
    'menu': render.render_menu,
    'reviews': render.render_reviews,
    'reservations': render.render_reservations,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='restora_client', description='Restora client, keeps a local copy of '
                                                                       'the restaurant data in sync with the API')
    parser.add_argument('--api-base', default=constants.API_BASE, help='API url (default: %(default)s)')
    parser.add_argument('--storage-dir', default=constants.STORAGE_DIR,
                        help='directory of the local cache (default: %(default)s)')
    parser.add_argument('--interval', type=float, default=constants.SYNC_INTERVAL,
                        help='seconds between periodic syncs in watch mode (default: %(default)s)')
    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('menu', help='sync the menu once and print it')
    subparsers.add_parser('reviews', help='sync the reviews once and print them')
    subparsers.add_parser('reservations', help='sync the reservations once and print them')
    subparsers.add_parser('watch', help='keep syncing and print every change until interrupted')
    return parser.parse_args(argv)


def build_client(args, output=None) -> RestoraClient:
    return RestoraClient(remote=RemoteAccessLayer(args.api_base), durable=FileStorage(args.storage_dir),
                         scheduler=SyncScheduler(interval=args.interval), output=output)


def print_render(kind, text):
    print(f'--- {kind} ---\n{text}\n', flush=True)


async def show(args):
    client = build_client(args)
    try:
        reconciler = getattr(client, args.command)
        if not await reconciler.sync():
            logger.warning(f"show ::: could not reach {args.api_base}, printing the local copy")
        records = reconciler.read_local()
        if args.command == 'menu':
            user = client.session.current_user or {}
            print(render.render_menu(records, client.reviews.read_local(), user.get('favorites') or ()))
        else:
            print(renderers[args.command](records))
    finally:
        await client.stop()


async def watch(args):
    client = build_client(args, output=print_render)
    await client.start()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await client.stop()


def main(argv=None):
    args = parse_args(argv)
    try:
        asyncio.run(watch(args) if args.command == 'watch' else show(args))
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == '__main__':
    sys.exit(main())
