"""Client reload script and its injection into HTML pages."""

from __future__ import annotations

import json
from pathlib import Path
from string import Template

HTML_EXTENSIONS = frozenset({".html", ".htm"})

# Reconnect delay in milliseconds after the socket closes
RETRY_DELAY_MS = 1000

_RELOAD_JS = Template("""(function(){
	var w;
	var connecting = false;
	var scheme = document.location.protocol === "https:" ? "wss://" : "ws://";

	function retry(){
		setTimeout(connect, $retry);
	}

	function connect(){
		if (connecting) {
			return;
		}
		try {
			connecting = true;
			w = new WebSocket(scheme + "$host/$path");

			w.onclose = function(){
				console.error("Connection closed, try to reconnect");
				connecting = false;
				retry();
			};

			w.onopen = function(){
				console.info("Connected to reload websocket");
				connecting = false;
			};

			w.onmessage = function(m){
				var d = JSON.parse(m.data);
				if (d.reload) {
					document.location.reload();
				}
			};
		} catch(e) {
			connecting = false;
			w = null;
			retry();
		}
	}

	connect();
})();
""")


def render_reload_script(host: str, reload_path: str) -> str:
    """Build the browser script that listens for reload messages.

    Args:
        host: Host (and port) the browser used to reach the server. It
            comes from a request header and is escaped for a JS string.
        reload_path: Path name of the WebSocket endpoint, without slashes.
    """
    return _RELOAD_JS.substitute(
        host=_js_string(host),
        path=_js_string(reload_path),
        retry=RETRY_DELAY_MS,
    )


def _js_string(value: str) -> str:
    # Body of a double-quoted JS string literal; "</" must not end a tag
    return json.dumps(value)[1:-1].replace("</", "<\\/")


def script_tag(script_path: str) -> str:
    return f'<script src="{script_path}"></script>'


def inject_script(html: str, script_path: str) -> str:
    """Insert the reload script tag before the first ``</body>``.

    Documents without a closing body tag are returned unchanged.
    """
    return html.replace("</body>", script_tag(script_path) + "\n</body>", 1)


def is_html(path: Path) -> bool:
    return path.suffix.lower() in HTML_EXTENSIONS
