"""Single-page student client served by the API."""

STUDENT_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Daily Quiz</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #f1f5f9; color: #0f172a; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 44rem; margin-inline: auto; }
      .card { background: #fff; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.25rem 1rem rgba(15, 23, 42, 0.08); }
      .hidden { display: none; }
      input { width: 100%; box-sizing: border-box; padding: 0.6rem; margin-bottom: 0.6rem; border: 1px solid #cbd5e1; border-radius: 0.5rem; font-size: 1rem; }
      button { border: none; border-radius: 0.6rem; padding: 0.75rem 1.25rem; font-size: 1rem; background: #2563eb; color: #fff; cursor: pointer; }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      .link { background: none; color: #2563eb; padding: 0; }
      .error { color: #dc2626; min-height: 1.2rem; }
      .timers { display: flex; justify-content: space-between; font-weight: 600; margin-bottom: 1rem; }
      .options-grid { display: grid; gap: 0.6rem; }
      .option-button { text-align: left; background: #e2e8f0; color: #0f172a; }
      .option-button.correct { background: #16a34a; color: #fff; }
      .option-button.incorrect { background: #dc2626; color: #fff; }
      .result { font-size: 2.5rem; font-weight: 700; text-align: center; }
      .muted { color: #64748b; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] } };
    </script>
    <script defer src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
  </head>
  <body>
    <section class="card" id="login-card">
      <h1>Daily Quiz</h1>
      <input id="login-code" placeholder="Your code, e.g. A01" autocomplete="off" />
      <button id="login-button">Log in</button>
      <button class="link" id="show-register">New here? Register</button>
      <p class="error" id="login-error"></p>
    </section>
    <section class="card hidden" id="register-card">
      <h2>Register</h2>
      <input id="reg-name" placeholder="Full name, e.g. John Doe" />
      <input id="reg-age" type="number" placeholder="Age, e.g. 18" />
      <input id="reg-village" placeholder="Village, e.g. Smallville" />
      <button id="register-button">Register</button>
      <button class="link" id="show-login">Back to login</button>
      <p class="error" id="register-error"></p>
      <p id="register-result" class="hidden">Your login code is <strong id="issued-code"></strong>. Please save it.</p>
    </section>
    <section class="card hidden" id="quiz-card">
      <div class="timers">
        <span id="participant-label" class="muted"></span>
        <span id="online-label" class="muted"></span>
        <span id="global-label"></span>
      </div>
      <div id="waiting" class="hidden"><p>Waiting for today's quiz to be published…</p></div>
      <div id="question-area" class="hidden">
        <div class="timers">
          <span id="progress-label"></span>
          <span id="question-label"></span>
        </div>
        <div id="prompt"></div>
        <div id="options" class="options-grid"></div>
      </div>
      <div id="result-area" class="hidden">
        <p class="muted">Quiz complete</p>
        <p class="result" id="result-label"></p>
        <p id="result-percentage" class="muted" style="text-align:center"></p>
        <button id="retry-button" class="hidden">Retry saving my result</button>
      </div>
      <p class="error" id="quiz-error"></p>
      <button class="link" id="logout-button">Log out</button>
    </section>
    <script>
      const $ = (id) => document.getElementById(id);
      let pollHandle = null;
      let renderedQuestionId = null;

      function show(id, visible) { $(id).classList.toggle('hidden', !visible); }
      function formatTime(seconds) {
        const m = Math.floor(seconds / 60);
        const s = seconds % 60;
        return `${m}:${String(s).padStart(2, '0')}`;
      }

      async function post(path, body) {
        const response = await fetch(path, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {}),
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) { throw new Error(payload.detail || 'Request failed'); }
        return payload;
      }

      function renderQuestion(view) {
        const question = view.current_question;
        if (question.id !== renderedQuestionId) {
          renderedQuestionId = question.id;
          $('prompt').innerHTML = question.prompt_html;
          $('options').innerHTML = '';
          question.options.forEach((option) => {
            const button = document.createElement('button');
            button.className = 'option-button';
            button.dataset.optionId = option.id;
            button.innerHTML = option.html;
            button.addEventListener('click', () => choose(option.id));
            $('options').appendChild(button);
          });
          if (window.MathJax && window.MathJax.typesetPromise) { window.MathJax.typesetPromise([$('question-area')]); }
        }
        const feedback = view.feedback;
        document.querySelectorAll('.option-button').forEach((button) => {
          button.disabled = Boolean(feedback);
          button.classList.remove('correct', 'incorrect');
          if (feedback && button.dataset.optionId === feedback.selected_option_id) {
            button.classList.add(feedback.is_correct ? 'correct' : 'incorrect');
          }
        });
        $('progress-label').textContent = `Question ${view.question_number} of ${view.total_questions}`;
        $('question-label').textContent = `${view.question_seconds_left}s`;
      }

      function render(view) {
        $('online-label').textContent = `${view.online_count} online`;
        $('global-label').textContent = view.quiz_id ? `Time left ${formatTime(view.global_seconds_left)}` : '';
        show('waiting', view.phase === 'awaiting_quiz');
        show('question-area', Boolean(view.current_question));
        show('result-area', view.phase === 'submitted');
        $('quiz-error').textContent = view.error_message || '';
        if (view.participant) { $('participant-label').textContent = `${view.participant.code} ${view.participant.name}`; }
        if (view.current_question) { renderQuestion(view); } else { renderedQuestionId = null; }
        if (view.result) {
          $('result-label').textContent = view.result.label;
          $('result-percentage').textContent = `${view.result.percentage.toFixed(1)}%`;
        }
        show('retry-button', view.phase === 'submitted' && !view.submission_persisted);
      }

      async function refresh() {
        const response = await fetch('/session');
        if (response.status === 401) { stopPolling(); showLogin(); return; }
        render(await response.json());
      }

      async function choose(optionId) {
        try { await post('/answer', { option_id: optionId }); await refresh(); }
        catch (err) { $('quiz-error').textContent = err.message; }
      }

      function startPolling() { stopPolling(); refresh(); pollHandle = setInterval(refresh, 500); }
      function stopPolling() { if (pollHandle) { clearInterval(pollHandle); pollHandle = null; } }
      function showLogin() { show('login-card', true); show('register-card', false); show('quiz-card', false); }

      $('login-button').addEventListener('click', async () => {
        try {
          await post('/login', { code: $('login-code').value.toUpperCase() });
          $('login-error').textContent = '';
          show('login-card', false); show('quiz-card', true);
          startPolling();
        } catch (err) { $('login-error').textContent = err.message; }
      });
      $('register-button').addEventListener('click', async () => {
        try {
          const payload = await post('/register', {
            name: $('reg-name').value, age: $('reg-age').value, village: $('reg-village').value,
          });
          $('register-error').textContent = '';
          $('issued-code').textContent = payload.code;
          $('login-code').value = payload.code;
          show('register-result', true);
        } catch (err) { $('register-error').textContent = err.message; }
      });
      $('retry-button').addEventListener('click', async () => {
        try { await post('/submission/retry'); await refresh(); }
        catch (err) { $('quiz-error').textContent = err.message; }
      });
      $('logout-button').addEventListener('click', async () => { await post('/logout'); stopPolling(); showLogin(); });
      $('show-register').addEventListener('click', () => { show('login-card', false); show('register-card', true); });
      $('show-login').addEventListener('click', showLogin);

      fetch('/session').then((response) => {
        if (response.ok) { show('login-card', false); show('quiz-card', true); startPolling(); }
      });
    </script>
  </body>
</html>
"""
