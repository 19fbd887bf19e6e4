"""
Frontend artifact generators.

Feature text reaches markup only through html_text() and scripts only
through js_string(); framework templates read it from a constant rather
than interpolating it into template syntax.

codeintel/src/codeintel/templates/frontend.py
"""

from ..comments import html_text, js_string
from . import TemplateContext, render

__all__ = ["html", "css", "react", "vue", "angular", "javascript"]

_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>__TITLE__</title>
  <meta name="description" content="__TITLE__">
  <meta property="og:title" content="__TITLE__">
  <meta property="og:description" content="__TITLE__">
  <meta name="twitter:card" content="summary">
  <link rel="canonical" href="/">
  <link rel="preload" href="/styles.css" as="style">
  <link rel="stylesheet" href="/styles.css">
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "WebPage", "name": __TITLE_JS__}
  </script>
</head>
<body>
  <a class="skip-to-main" href="#main">Skip to main content</a>
  <header role="banner">
    <nav aria-label="Primary">
      <ul>
        <li><a href="/">Home</a></li>
        <li><a href="/about">About</a></li>
      </ul>
    </nav>
  </header>

  <main id="main" role="main">
    <h1>__TITLE__</h1>
    <section aria-labelledby="feature-form-title">
      <h2 id="feature-form-title">Get started</h2>
      <form id="feature-form" aria-describedby="feature-form-status">
        <label for="feature-input">Your input</label>
        <input id="feature-input" name="data" type="text" required minlength="1">
        <button type="submit">Submit</button>
      </form>
      <p id="feature-form-status" role="alert" aria-live="polite"></p>
    </section>
  </main>

  <footer role="contentinfo">
    <p><small>&copy; Example</small></p>
  </footer>

  <noscript>This page works best with JavaScript enabled.</noscript>
  <script type="module" src="/app.js" defer></script>
</body>
</html>
"""

_CSS = """
:root {
  --color-text: #1a1a1a;
  --color-background: #ffffff;
  --color-accent: #0b5fff;
  --space: 1rem;
  --radius: 0.5rem;
}

html {
  box-sizing: border-box;
}

body {
  margin: 0;
  font-family: system-ui, sans-serif;
  line-height: 1.5;
  color: var(--color-text);
  background-color: var(--color-background);
}

.__BLOCK__ {
  display: grid;
  gap: var(--space);
  padding: var(--space);
  contain: layout;
}

.__BLOCK__ :is(button, a):focus-visible {
  outline: 3px solid var(--color-accent);
  outline-offset: 2px;
}

.__BLOCK__ button {
  padding: calc(var(--space) / 2) var(--space);
  border: 0;
  border-radius: var(--radius);
  color: var(--color-background);
  background-color: var(--color-accent);
  transition: transform 150ms ease-out;
}

@media (min-width: 48rem) {
  .__BLOCK__ {
    grid-template-columns: repeat(2, minmax(0, 1fr));
  }
}

@media (prefers-reduced-motion: reduce) {
  .__BLOCK__ button {
    transition: none;
  }
}
"""

_REACT = """
import React, { useCallback, useMemo, useState } from 'react';

const FEATURE = __FEATURE_JS__;

export interface __CLASSNAME__Item {
  id: string;
  label: string;
}

export interface __CLASSNAME__Props {
  items?: __CLASSNAME__Item[];
  endpoint?: string;
}

export const __CLASSNAME__ = React.memo(function __CLASSNAME__({ items = [], endpoint = '/api/process' }: __CLASSNAME__Props) {
  const [status, setStatus] = useState<string>('');
  const [loading, setLoading] = useState<boolean>(false);

  const sortedItems = useMemo(() => [...items].sort((a, b) => a.label.localeCompare(b.label)), [items]);

  const handleSubmit = useCallback(async () => {
    setLoading(true);
    try {
      const response = await fetch(endpoint, {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ data: sortedItems }),
      });
      setStatus(response.ok ? 'Saved' : `Request failed (${response.status})`);
    } catch (error) {
      setStatus('Network error, please retry');
    } finally {
      setLoading(false);
    }
  }, [endpoint, sortedItems]);

  return (
    <section aria-labelledby="feature-title">
      <h1 id="feature-title">{FEATURE}</h1>
      <ul>
        {sortedItems.map((item) => (
          <li key={item.id}>{item.label}</li>
        ))}
      </ul>
      <button type="button" onClick={handleSubmit} disabled={loading} aria-busy={loading}>
        Submit
      </button>
      <p role="status" aria-live="polite">{status}</p>
    </section>
  );
});

export default __CLASSNAME__;
"""

_VUE = """
<template>
  <section class="feature" aria-labelledby="feature-title">
    <h1 id="feature-title">{{ title }}</h1>
    <ul>
      <li v-for="item in sortedItems" :key="item.id">{{ item.label }}</li>
    </ul>
    <button type="button" :disabled="loading" :aria-busy="loading" @click="submit">Submit</button>
    <p role="status" aria-live="polite">{{ status }}</p>
  </section>
</template>

<script setup lang="ts">
import { computed, ref } from 'vue';

interface Item {
  id: string;
  label: string;
}

const props = withDefaults(defineProps<{ items?: Item[]; endpoint?: string }>(), {
  items: () => [],
  endpoint: '/api/process',
});

const title = __FEATURE_JS__;
const status = ref('');
const loading = ref(false);

const sortedItems = computed(() => [...props.items].sort((a, b) => a.label.localeCompare(b.label)));

async function submit() {
  loading.value = true;
  try {
    const response = await fetch(props.endpoint, {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ data: sortedItems.value }),
    });
    status.value = response.ok ? 'Saved' : `Request failed (${response.status})`;
  } catch (error) {
    status.value = 'Network error, please retry';
  } finally {
    loading.value = false;
  }
}
</script>

<style scoped>
.feature {
  display: grid;
  gap: 1rem;
}
</style>
"""

_ANGULAR = """
import { ChangeDetectionStrategy, Component, Input, inject } from '@angular/core';
import { HttpClient } from '@angular/common/http';
import { NgFor } from '@angular/common';
import { finalize } from 'rxjs';

export interface __CLASSNAME__Item {
  id: string;
  label: string;
}

@Component({
  selector: 'app-__SELECTOR__',
  standalone: true,
  imports: [NgFor],
  changeDetection: ChangeDetectionStrategy.OnPush,
  template: `
    <section aria-labelledby="feature-title">
      <h1 id="feature-title">{{ title }}</h1>
      <ul>
        <li *ngFor="let item of items; trackBy: trackById">{{ item.label }}</li>
      </ul>
      <button type="button" [disabled]="loading" [attr.aria-busy]="loading" (click)="submit()">Submit</button>
      <p role="status" aria-live="polite">{{ status }}</p>
    </section>
  `,
})
export class __CLASSNAME__Component {
  private readonly http = inject(HttpClient);

  @Input() items: __CLASSNAME__Item[] = [];
  @Input() endpoint = '/api/process';

  readonly title = __FEATURE_JS__;
  status = '';
  loading = false;

  trackById(index: number, item: __CLASSNAME__Item): string {
    return item.id;
  }

  submit(): void {
    this.loading = true;
    this.http
      .post(this.endpoint, { data: this.items })
      .pipe(finalize(() => (this.loading = false)))
      .subscribe({
        next: () => (this.status = 'Saved'),
        error: () => (this.status = 'Request failed, please retry'),
      });
  }
}
"""

_JAVASCRIPT = """
const FEATURE = __FEATURE_JS__;

export class __CLASSNAME__ {
  constructor(root, { endpoint = '/api/process' } = {}) {
    this.root = root;
    this.endpoint = endpoint;
    this.status = root.querySelector('[role="status"]');
  }

  async submit(data) {
    try {
      const response = await fetch(this.endpoint, {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ data }),
      });
      if (!response.ok) {
        throw new Error(`Request failed (${response.status})`);
      }
      this.render('Saved');
      return await response.json();
    } catch (error) {
      this.render(error.message);
      return null;
    }
  }

  render(message) {
    if (this.status) {
      this.status.textContent = `${FEATURE}: ${message}`;
    }
  }
}

export function mount(selector) {
  const root = document.querySelector(selector);
  return root ? new __CLASSNAME__(root) : null;
}
"""


def html(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _HTML, title=html_text(ctx.feature), title_js=js_string(ctx.feature)
    )


def css(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_CSS, block=ctx.table_name.replace("_", "-"))


def react(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _REACT, classname=ctx.class_name, feature_js=js_string(ctx.feature)
    )


def vue(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_VUE, feature_js=js_string(ctx.feature))


def angular(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _ANGULAR,
        classname=ctx.class_name,
        selector=ctx.table_name.replace("_", "-"),
        feature_js=js_string(ctx.feature),
    )


def javascript(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _JAVASCRIPT, classname=ctx.class_name, feature_js=js_string(ctx.feature)
    )
