HTML = """<!doctype html><meta charset="utf-8">
<title>OpsBoard — 시스템 상태</title>
<style>
body{font-family:sans-serif;margin:24px}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(260px,1fr));gap:12px}
.card{border:1px solid #ddd;border-radius:10px;padding:12px;cursor:pointer}
.badge{padding:2px 8px;border-radius:999px;font-size:12px}
.HEALTHY{background:#e6ffec}.DEGRADED{background:#fff8e1}.CRITICAL{background:#ffebe6}
.meta{color:#666;font-size:12px}
.incident{border-left:4px solid #c33;padding:4px 8px;margin:6px 0;background:#fff5f5}
#detail{white-space:pre-wrap;font-size:12px;background:#f8f9fa;border:1px solid #e9ecef;border-radius:6px;padding:8px;margin-top:12px}
</style>
<h1>OpsBoard — 시스템 상태</h1>
<p class="meta">데모용 시나리오입니다. 실제 데이터 수집은 없습니다.</p>
<button onclick="post('/api/scenario/start?s=1')">시나리오 1</button>
<button onclick="post('/api/scenario/start?s=2')">시나리오 2</button>
<button onclick="post('/api/scenario/stop')">초기화</button>
<div id="ts" class="meta"></div>
<div id="incidents"></div>
<div id="grid" class="grid"></div>
<div id="detail"></div>
<script>
let names = {};
async function post(url, body){
  await fetch(url, {method:'POST', headers:{'Content-Type':'application/json'}, body: body ? JSON.stringify(body) : undefined});
}
async function showNode(id){
  const r = await fetch('/api/node/'+id+'/drilldown');
  const d = await r.json();
  const el = document.getElementById('detail');
  el.textContent = `[${d.node.name}] ${d.rootCause}\\n\\n` + d.logs.join('\\n');
  for (const s of d.suggestions){
    const b = document.createElement('button');
    b.textContent = s.label; b.title = s.description;
    b.onclick = () => post('/api/remediation/apply', {actionId: s.id, nodeId: id});
    el.appendChild(document.createElement('br')); el.appendChild(b);
  }
}
function render(data){
  document.getElementById('ts').textContent = 'Last update: '+ new Date().toLocaleString();
  const grid = document.getElementById('grid'); grid.innerHTML='';
  for (const [id, n] of Object.entries(data.status)){
    const m = data.metrics[id] || {};
    const div = document.createElement('div'); div.className='card';
    div.onclick = () => showNode(id);
    div.innerHTML = `
      <div style="display:flex;justify-content:space-between"><strong>${n.name}</strong>
      <span class="badge ${n.status}">${n.status}</span></div>
      <div class="meta">${n.type}</div>
      <div>CPU ${m.cpu.toFixed(1)}% | MEM ${m.memory.toFixed(1)}%</div>
      <div>응답 ${m.response_time.toFixed(0)} ms | 큐 ${m.queue_depth.toFixed(0)} | 오류 ${m.error_rate.toFixed(2)}%</div>`;
    grid.appendChild(div);
  }
  document.getElementById('incidents').innerHTML = data.incidents.map(i =>
    `<div class="incident"><b>${i.severity}</b> ${i.title} <span class="meta">${i.nodeId} · ${i.createdAt}</span></div>`).join('');
}
const es = new EventSource('/api/events');
es.addEventListener('update', e => render(JSON.parse(e.data)));
</script>
"""
