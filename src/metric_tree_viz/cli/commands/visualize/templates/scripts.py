"""Browser client for the metric tree page.

The client owns no view logic: it forwards the location hash to
``/api/render``, swaps in the returned SVG and panel markup, and writes the
fragments carried by clicked elements back into the hash.

Stale responses are ignored: each request gets a sequence number and only
the latest one is applied.
"""


def get_all_scripts() -> str:
    """Generate all JavaScript for the page.

    Returns:
        Complete JavaScript code as a single string
    """
    return """
let requestSeq = 0;

function currentFragment() {
    return window.location.hash.replace(/^#/, '');
}

function setStatus(text, isError = false) {
    const status = document.getElementById('status');
    status.textContent = text;
    status.classList.toggle('error', isError);
}

async function renderFromHash() {
    const seq = ++requestSeq;
    const fragment = currentFragment();
    setStatus('Loading...');

    let payload;
    try {
        const response = await fetch('/api/render?' + fragment);
        payload = await response.json();
        if (!response.ok) {
            throw new Error(payload.error || response.statusText);
        }
    } catch (err) {
        if (seq === requestSeq) {
            // Keep the previous diagram on screen
            setStatus('Failed to load tree: ' + err.message, true);
        }
        return;
    }

    if (seq !== requestSeq) {
        return;
    }

    document.getElementById('diagram').innerHTML = payload.svg;
    const panel = document.getElementById('detail-panel');
    panel.innerHTML = payload.panel_html;
    panel.classList.toggle('open', Boolean(payload.panel_html));
    document.getElementById('query').value = payload.query || '';
    setStatus(payload.node_count + ' nodes, coloring by ' + payload.active_key);
}

function navigate(fragment) {
    if (currentFragment() === fragment) {
        renderFromHash();
    } else {
        window.location.hash = fragment;
    }
}

function handleDiagramClick(event) {
    if (event.target.closest('a')) {
        return;
    }
    const node = event.target.closest('.node');
    if (!node) {
        return;
    }
    event.preventDefault();
    event.stopPropagation();
    navigate(node.dataset.fragment);
}

function handlePanelClick(event) {
    const close = event.target.closest('.close-btn');
    if (close) {
        event.preventDefault();
        // Closing needs no re-render, only the hash is updated
        history.replaceState(null, '', '#' + close.dataset.fragment);
        document.getElementById('detail-panel').classList.remove('open');
        return;
    }
    const key = event.target.closest('.metric-key');
    if (key) {
        event.preventDefault();
        navigate(key.dataset.fragment);
    }
}

function handleQuerySubmit(event) {
    event.preventDefault();
    const params = new URLSearchParams(currentFragment());
    const query = document.getElementById('query').value.trim();
    if (query) {
        params.set('query', query);
    } else {
        params.delete('query');
    }
    navigate(params.toString().replace(/\\+/g, '%20'));
}

document.addEventListener('DOMContentLoaded', () => {
    document.getElementById('diagram').addEventListener('click', handleDiagramClick);
    document.getElementById('detail-panel').addEventListener('click', handlePanelClick);
    document.getElementById('query-form').addEventListener('submit', handleQuerySubmit);
    window.addEventListener('hashchange', renderFromHash);
    renderFromHash();
});
"""
