import argparse
import sys

from strava_tools import auth, config, credentials
from strava_tools.errors import StravaToolsError


def main(argv=None):
    parser = argparse.ArgumentParser(description="One-time Strava authorization. Writes the config file.")
    parser.add_argument('-config', '--config', dest='config', default=config.CONFIG_FILE,
                        help='Where to write the credentials (default: %(default)s)')
    parser.add_argument('-client-id', '--client-id', dest='client_id', default=config.CLIENT_ID)
    parser.add_argument('-client-secret', '--client-secret', dest='client_secret', default=config.CLIENT_SECRET)
    args = parser.parse_args(argv)

    if not args.client_id or not args.client_secret:
        print("❌ ERROR: Set STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET in .local.env or pass -client-id / -client-secret")
        sys.exit(1)

    # 1. GENERATE THE AUTHORIZATION URL
    print("--- Strava Auth Setup ---")
    print(f"Target File: {args.config}\n")
    print("1. Go to the following URL in your browser to authorize:")
    print(auth.build_authorize_url(args.client_id))

    # 2. USER INPUT
    print("\n2. After you click 'Authorize', you will be redirected to a localhost page that fails.")
    print("   Copy the 'code' from the URL (everything after code= and before &scope)")
    auth_code = input("\n   Paste the 'code' here: ").strip()

    # 3. EXCHANGE CODE FOR TOKENS
    print("\n3. Exchanging code for tokens...")
    try:
        record = auth.exchange_code(args.client_id, args.client_secret, auth_code)
    except StravaToolsError as e:
        print(f"\nError exchanging token: {e}")
        sys.exit(1)

    credentials.save_config(args.config, record)
    print(f"\nSUCCESS! Tokens saved to '{args.config}'")


if __name__ == "__main__":
    main()
