"""Single-page gallery markup."""

from __future__ import annotations

import html

from ..assets.categories import CATEGORY_SPECS

_PAGE = """<!doctype html>
<html>
<head>
  <meta charset='utf-8'>
  <title>Designer Gallery</title>
  <style>
    body { font-family: -apple-system, Arial, sans-serif; background: #f5f5f7; color: #1d1d1f; margin: 0; }
    nav { position: sticky; top: 0; background: rgba(255,255,255,0.85); padding: 14px 24px; display: flex; justify-content: space-between; border-bottom: 1px solid #e3e3e8; }
    main { display: grid; grid-template-columns: minmax(260px, 1fr) 2fr; gap: 32px; padding: 32px 24px; max-width: 1200px; margin: 0 auto; }
    .panel { background: white; border-radius: 16px; border: 1px solid #d2d2d7; padding: 16px; margin-bottom: 16px; }
    #preview { width: 100%; border-radius: 12px; display: none; }
    textarea { width: 100%; height: 110px; border: none; background: #f5f5f7; border-radius: 10px; padding: 10px; box-sizing: border-box; }
    button { background: #0071e3; color: white; border: none; border-radius: 999px; padding: 8px 18px; cursor: pointer; }
    button:disabled { opacity: 0.4; cursor: default; }
    .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(280px, 1fr)); gap: 20px; }
    .card { background: white; border-radius: 24px; border: 1px solid #d2d2d7; overflow: hidden; }
    .head { display: flex; justify-content: space-between; align-items: center; padding: 12px 16px; }
    .label { font-weight: 600; font-size: 14px; }
    .caption { font-size: 11px; color: #86868b; }
    .body { height: 300px; display: flex; align-items: center; justify-content: center; padding: 16px; text-align: center; }
    .body img { max-width: 100%; max-height: 100%; border-radius: 12px; }
    .error { color: #c0392b; font-size: 12px; }
    .muted { color: #86868b; font-size: 12px; letter-spacing: 0.15em; text-transform: uppercase; }
  </style>
</head>
<body>
  <nav><strong>Designer Gallery</strong><button id='design' disabled>Design now</button></nav>
  <main>
    <div>
      <div class='panel'>
        <h3>Reference image</h3>
        <img id='preview' alt='Style reference'>
        <input id='file' type='file' accept='image/*'>
      </div>
      <div class='panel'>
        <h3>Creative note</h3>
        <textarea id='note' placeholder='Extra design requirements, e.g. "add dragon motifs"'></textarea>
      </div>
      <div class='panel' id='analysis' style='display:none'>
        <h4>Style analysis</h4>
        <p id='analysis-text'></p>
      </div>
      <div class='error' id='analysis-error'></div>
    </div>
    <div class='grid'>
      __CARDS__
    </div>
  </main>
  <script>
    const post = (url, body) => fetch(url, {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body || {})});
    document.getElementById('file').addEventListener('change', (event) => {
      const file = event.target.files[0];
      if (!file) return;
      const reader = new FileReader();
      reader.onloadend = () => {
        document.getElementById('preview').src = reader.result;
        document.getElementById('preview').style.display = 'block';
        post('/api/reference', {image: reader.result}).then(refresh);
      };
      reader.readAsDataURL(file);
    });
    document.getElementById('note').addEventListener('change', (event) => post('/api/note', {note: event.target.value}));
    document.getElementById('design').addEventListener('click', () => {
      post('/api/note', {note: document.getElementById('note').value}).then(() => post('/api/design')).then(refresh);
    });
    document.querySelectorAll('[data-retry]').forEach((button) => {
      button.addEventListener('click', () => post('/api/assets/' + button.dataset.retry + '/retry').then(refresh));
    });
    function renderCard(category, asset, state) {
      const body = document.getElementById('body-' + category);
      const retry = document.querySelector('[data-retry="' + category + '"]');
      const download = document.getElementById('download-' + category);
      retry.disabled = asset.status === 'loading' || !state.analysis;
      download.style.display = asset.status === 'success' ? 'inline' : 'none';
      if (asset.status === 'loading') {
        body.innerHTML = "<span class='muted'>Crafting...</span>";
      } else if (asset.status === 'success') {
        const src = '/api/assets/' + category + '/image?g=' + asset.generation;
        if (!body.querySelector('img') || body.querySelector('img').getAttribute('src') !== src) {
          body.innerHTML = "<img alt='" + category + "' src='" + src + "'>";
        }
      } else if (asset.status === 'error') {
        body.innerHTML = '';
        const message = document.createElement('p');
        message.className = 'error';
        message.textContent = asset.error;
        body.appendChild(message);
      } else {
        body.innerHTML = "<span class='muted'>Waiting</span>";
      }
    }
    function refresh() {
      return fetch('/api/state').then((r) => r.json()).then((state) => {
        const design = document.getElementById('design');
        design.disabled = !state.has_reference || state.analyzing;
        design.textContent = state.analyzing ? 'Analyzing...' : 'Design now';
        document.getElementById('analysis').style.display = state.analysis ? 'block' : 'none';
        document.getElementById('analysis-text').textContent = state.analysis ? state.analysis.text : '';
        document.getElementById('analysis-error').textContent = state.analysis_error || '';
        Object.entries(state.assets).forEach(([category, asset]) => renderCard(category, asset, state));
      });
    }
    refresh();
    setInterval(refresh, 1500);
  </script>
</body>
</html>
"""


def render_card(category_value: str, label: str, caption: str, aspect_ratio: str) -> str:
    value = html.escape(category_value, quote=True)
    return (
        f"<div class='card'>"
        f"<div class='head'><div><div class='label'>{html.escape(label)}</div>"
        f"<div class='caption'>{html.escape(caption)} &middot; {html.escape(aspect_ratio)}</div></div>"
        f"<div><a id='download-{value}' href='/api/assets/{value}/download' style='display:none'>Download</a> "
        f"<button data-retry='{value}' disabled>Retry</button></div></div>"
        f"<div class='body' id='body-{value}'><span class='muted'>Waiting</span></div>"
        f"</div>"
    )


def render_index() -> str:
    cards = [
        render_card(spec.category.value, spec.label, spec.caption, spec.aspect_ratio)
        for spec in CATEGORY_SPECS.values()
    ]
    return _PAGE.replace("__CARDS__", "\n      ".join(cards))
