import sys
try:
    from . import create_app
except ImportError:  # pragma: no cover - fallback when running from growthwave/ cwd
    from __init__ import create_app

app = create_app()

if __name__ == '__main__':
    port = int(sys.argv[1]) if len(sys.argv) > 1 else 4321
    print(f" * Serving {app.config['SITE_ROOT']} on http://127.0.0.1:{port}")
    # Unmapped hosts pass through: browse /capital/ etc. directly, or map a brand domain to 127.0.0.1.
    app.run(host='127.0.0.1', port=port, debug=False)
