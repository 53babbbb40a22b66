"""Shared fixtures for core unit tests"""

import pytest


SAMPLE_MDX = """\
# Guide

<Callout type="warning" count={2} dismissible>
Be **careful** here.
</Callout>

After.
"""

SAMPLE_FM_MDX = """\
---
title: Setup
order: 2
date: 2024-01-15
tags: [setup, intro]
---

# Setup

Install the project.
"""


def callout(props: dict, children: str) -> str:
    return f'<aside class="callout-{props["type"]}">{children}</aside>'


def kbd(props: dict, children: str) -> str:
    return f"<kbd>{children}</kbd>"


@pytest.fixture(name="components")
def components_fixture():
    return {"Callout": callout, "Kbd": kbd}


@pytest.fixture(name="sample_mdx")
def sample_mdx_fixture():
    return SAMPLE_MDX


@pytest.fixture(name="sample_fm_mdx")
def sample_fm_mdx_fixture():
    return SAMPLE_FM_MDX
