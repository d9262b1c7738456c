"""
templates.py

Embedded Jinja2 templates for a Stan-backed R package skeleton.

`SKELETON_TEMPLATES` maps a relative output path (itself a template) to the file
template. Context variables:
- `name`: package name
- `descriptor`: `PackageDescriptor`
- `dcf`: rendered DESCRIPTION text
- `models`: sorted list of model names
"""

from __future__ import annotations

from types import MappingProxyType

DESCRIPTION_TEMPLATE = "{{ dcf }}"

NAMESPACE_TEMPLATE = """\
# Generated by roxygen2: do not edit by hand

import(Rcpp)
import(methods)
importFrom(RcppParallel,RcppParallelLibs)
importFrom(rstan,sampling)
importFrom(rstantools,rstan_config)
useDynLib({{ name }}, .registration = TRUE)
"""

PACKAGE_DOC_TEMPLATE = """\
#' The '{{ name }}' package.
#'
#' @description {{ descriptor.description | continue_lines("#' ") }}
#'
#' @docType package
#' @name {{ name }}-package
#' @aliases {{ name }}
#' @useDynLib {{ name }}, .registration = TRUE
#' @import methods
#' @import Rcpp
#' @importFrom rstan sampling
#' @importFrom rstantools rstan_config
#' @importFrom RcppParallel RcppParallelLibs
#'
#' @references
#' Stan Development Team. RStan: the R interface to Stan. https://mc-stan.org
#'
"_PACKAGE"
"""

READ_AND_DELETE_ME_TEMPLATE = """\
Stan-specific notes:

* All '.stan' files containing stanmodel definitions must be placed in 'inst/stan'.
* Additional files to be included by stanmodel definition files
  (via e.g., #include "mylib.stan") must be placed in any subfolder of 'inst/stan'.
* Additional C++ files needed by any '.stan' file must be placed in 'inst/include',
  and can only interact with the Stan C++ library via '#include' directives
  placed in the file 'inst/include/stan_meta_header.hpp'.
* The precompiled stanmodel objects will appear in a named list called 'stanmodels',
  and you can call them with e.g., 'rstan::sampling(stanmodels$foo, ...)'
{%- if models %}

Models added to this package:
{% for model in models %}
* {{ model }} (inst/stan/{{ model }}.stan -> stanmodels${{ model }})
{%- endfor %}
{%- endif %}

Manual steps for '{{ name }}':

* Fill in Title, Description, Author and Maintainer in 'DESCRIPTION'.
* Document the package in 'R/{{ name }}-package.R' and run roxygen2 to create
  the help files in 'man' and refresh 'NAMESPACE'.
* 'NAMESPACE' already loads the compiled models with useDynLib(); add your own
  exports and imports next to it.
* Leave 'src' to the build: rstantools::rstan_config() (run by 'configure')
  writes the C++ sources for the models there.
* Run R CMD build to build the package tarball.
* Run R CMD check to check the package tarball.

Read "Writing R Extensions" for more information.
"""

RBUILDIGNORE_TEMPLATE = """\
^.*\\.Rproj$
^\\.Rproj\\.user$
^Read-and-delete-me$
"""

CONFIGURE_TEMPLATE = """\
#! /bin/sh
"${R_HOME}/bin/Rscript" -e "rstantools::rstan_config()"
"""

CONFIGURE_WIN_TEMPLATE = """\
#! /bin/sh
"${R_HOME}/bin${R_ARCH_BIN}/Rscript.exe" -e "rstantools::rstan_config()"
"""

STAN_META_HEADER_TEMPLATE = """\
// Insert all #include<foo.hpp> statements here
"""

STANMODELS_TEMPLATE = """\
# Generated by stanpkg.  Do not edit by hand.

# names of stan models
stanmodels <- c({% for model in models %}"{{ model }}"{% if not loop.last %}, {% endif %}{% endfor %})

# load each stan module
{% for model in models -%}
Rcpp::loadModule("stan_fit4{{ model }}_mod", what = TRUE)
{% endfor %}
# instantiate each stanmodel object
stanmodels <- sapply(stanmodels, function(model_name) {
  # create C++ code for stan model
  stan_file <- if(dir.exists("stan")) "stan" else file.path("inst", "stan")
  stan_file <- file.path(stan_file, paste0(model_name, ".stan"))
  stanfit <- rstan::stanc_builder(stan_file,
                                  allow_undefined = TRUE,
                                  obfuscate_model_name = FALSE)
  stanfit$model_cpp <- list(model_cppname = stanfit$model_name,
                            model_cppcode = stanfit$cppcode)
  # create stanmodel object
  methods::new(Class = "stanmodel",
               model_name = stanfit$model_name,
               model_code = stanfit$model_code,
               model_cpp = stanfit$model_cpp,
               mk_cppmodule = function(x) get(paste0("rstantools_model_", model_name)))
})
"""

STANMODELS_PATH = "R/stanmodels.R"
MODEL_SOURCE_DIR = "inst/stan"
ARTIFACT_DIR = "src"
EXECUTABLE_PATHS = frozenset({"configure", "configure.win"})

SKELETON_TEMPLATES = MappingProxyType(
    {
        "DESCRIPTION": DESCRIPTION_TEMPLATE,
        "NAMESPACE": NAMESPACE_TEMPLATE,
        "R/{{ name }}-package.R": PACKAGE_DOC_TEMPLATE,
        "Read-and-delete-me": READ_AND_DELETE_ME_TEMPLATE,
        ".Rbuildignore": RBUILDIGNORE_TEMPLATE,
        "configure": CONFIGURE_TEMPLATE,
        "configure.win": CONFIGURE_WIN_TEMPLATE,
        "inst/include/stan_meta_header.hpp": STAN_META_HEADER_TEMPLATE,
    }
)
