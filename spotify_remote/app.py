#!/usr/bin/env python3
"""
Spotify Authorization Redirect Server
Walks the operator through the authorization-code flow once to obtain a
refresh token, and lists playback devices for DEVICE_ID configuration.
"""
import logging
import secrets
import threading
from typing import Optional, Set
from urllib.parse import urlencode

from flask import Flask, redirect, request

from .config import Config, ConfigError
from .lib.api import SpotifyApiHelper
from .lib.auth import SpotifyOAuthClient
from .lib.errors import SpotifyError
from .lib.utils.logger import configure_logging, server_logger

ERROR_MESSAGE = 'An error occurred. Check console output for details.'


def create_app(config: Config, api: Optional[SpotifyApiHelper] = None,
               oauth: Optional[SpotifyOAuthClient] = None) -> Flask:
    """Build the redirect server around an explicit configuration"""
    app = Flask(__name__)
    api = api or SpotifyApiHelper(config)
    oauth = oauth or SpotifyOAuthClient(config, session=api.session)

    # States issued by /auth and not yet consumed by /callback
    issued_states: Set[str] = set()
    states_lock = threading.Lock()

    app.extensions['spotify_api'] = api

    @app.route('/auth')
    def auth():
        state = secrets.token_hex(16)
        with states_lock:
            issued_states.add(state)
        return redirect(oauth.get_authorization_url(state))

    @app.route('/callback')
    def callback():
        code = request.args.get('code')
        state = request.args.get('state')
        error = request.args.get('error')

        with states_lock:
            known_state = state is not None and state in issued_states
            issued_states.discard(state)

        if not known_state:
            server_logger.warning("Spotify callback missing or unknown state; rejecting")
            return redirect('/#' + urlencode({'error': 'state_mismatch'}))

        if error or not code:
            server_logger.error(f"❌ Spotify authorization failed: {error or 'missing code'}")
            return ERROR_MESSAGE, 400

        try:
            tokens = oauth.exchange_code_for_tokens(code)
        except SpotifyError as e:
            server_logger.error(f"❌ Authorization code exchange failed: {e}")
            return ERROR_MESSAGE, 500

        refresh_token = tokens['refresh_token']
        api.set_refresh_token(refresh_token)

        print()
        print('--- Add REFRESH_TOKEN to your ENVIRONMENT ---')
        print(refresh_token)
        print()

        return 'Check console output for token'

    @app.route('/devices')
    def devices():
        try:
            found = api.get_devices()
        except (SpotifyError, ConfigError) as e:
            server_logger.error(f"❌ Listing devices failed: {e}")
            return ERROR_MESSAGE, 500

        if not found:
            server_logger.info('No devices found.')
            return 'No devices found'

        print()
        print('--- Devices: ---')
        for name, device_id in found.items():
            print(f'{name}: {device_id}')
        print()

        return 'Check console output for devices'

    return app


def main(config: Optional[Config] = None) -> int:
    """Main entry point"""
    try:
        config = (config or Config.from_env()).validate()
    except ConfigError as e:
        server_logger.error(f"✗ {e}")
        return 1

    configure_logging(config.log_level, config.log_format, config.log_file)
    config.log_config()

    # Suppress werkzeug request lines; the routes log what matters
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    app = create_app(config)
    server_logger.info(f"Open http://localhost:{config.port}/auth on your webbrowser")
    try:
        app.run(host='localhost', port=config.port, debug=False)
    except KeyboardInterrupt:
        server_logger.info("Shutting down...")
    except OSError as e:
        server_logger.error(f"✗ Error starting server: {e}")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
