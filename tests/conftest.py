from __future__ import annotations

from pathlib import Path

import pytest

BERNOULLI = """\
data {
  int<lower=0> N;
  array[N] int<lower=0, upper=1> y;
}
parameters {
  real<lower=0, upper=1> theta;
}
model {
  theta ~ beta(1, 1);
  y ~ bernoulli(theta);
}
"""


@pytest.fixture
def stan_file(tmp_path: Path) -> Path:
    src = tmp_path / "models" / "bernoulli.stan"
    src.parent.mkdir()
    src.write_text(BERNOULLI, encoding="utf-8")
    return src


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir()
    return d

