"""
.. _exa-lexdec:

Plotting lexical decision data
==============================

A walk-through of the basic plot types with the ``lexdec`` lexical decision
data (Baayen, 2008): for each of 79 English animal and plant names,
participants decided whether the letter string was a word. ``RT`` is the log
reaction time.

The example uses a simulated version of the data with the same structure. To
use the real data, export it from R with ``write.csv(lexdec, 'lexdec.csv')``
(after ``library(languageR)``) and load it with
``ds = datasets.load_lexdec('lexdec.csv')``.
"""
# sphinx_gallery_thumbnail_number = 6
from lingplot import *

ds = datasets.get_lexdec()
print(ds.summary())

###############################################################################
# Histograms
# ^^^^^^^^^^
# Always look at the distribution of the dependent variable first.

p = plot.Histogram('RT', data=ds)

###############################################################################
# Are the distributions the same for native and non-native speakers? The
# second argument creates one panel for each native language group (all
# panels share the same bins and axis limits):

p = plot.Histogram('RT', 'NativeLanguage', data=ds)

###############################################################################
# Alternatively, overlay the two groups in different colors. With
# ``density=True``, the histograms are normalized so that groups of different
# size can be compared, and ``kde=True`` adds a smooth density estimate:

p = plot.Histogram('RT', color='NativeLanguage', density=True, kde=True, data=ds)

###############################################################################
# Scatterplots
# ^^^^^^^^^^^^
# Frequent words are recognized faster. With many overlapping points, some
# transparency (``alpha``) helps to see where most of the data are:

p = plot.Scatter('RT', 'Frequency', data=ds, alpha=.3, size=8)

###############################################################################
# A linear smoother shows the trend, with its 95% confidence band:

p = plot.Scatter('RT', 'Frequency', smooth='lm', data=ds, alpha=.3, size=8)

###############################################################################
# Does the frequency effect differ between the groups? With a ``color``
# variable, a separate regression line is drawn for each group:

p = plot.Scatter('RT', 'Frequency', 'NativeLanguage', smooth='lm', data=ds, alpha=.3, size=8)

###############################################################################
# Each line is stored in the :attr:`~plot.Scatter.fits` attribute:

for (facet, group), fit in p.fits.items():
    print(f"{group}: RT = {fit.intercept:.3f} + {fit.slope:.3f} * Frequency")

###############################################################################
# For a non-linear trend, use a lowess smoother instead:

p = plot.Scatter('RT', 'Frequency', 'NativeLanguage', smooth='lowess', data=ds, alpha=.3, size=8)

###############################################################################
# Bar plots with error bars
# ^^^^^^^^^^^^^^^^^^^^^^^^^
# Bars show the cell means, error bars the standard error of the mean. Since
# ``RT`` is log-transformed, bars starting at 0 would be misleading, so the
# y-axis starts at ``bottom=6``:

p = plot.Barplot('RT', 'NativeLanguage', data=ds, bottom=6)

###############################################################################
# The plot above treats every trial as independent, but trials come from a
# small number of participants. With ``match='Subject'``, each participant's
# mean is computed first. Since word class varies within participants, the
# error bars show within-subject variability (Loftus & Masson, 1994):

p = plot.Barplot('RT', 'Class', match='Subject', data=ds, bottom=6)

###############################################################################
# Violin plots
# ^^^^^^^^^^^^
# Violin plots show the whole distribution in each cell, which bars hide.
# ``%`` crosses two factors:

p = plot.Violin('RT', 'NativeLanguage % Class', data=ds)

###############################################################################
# Facets
# ^^^^^^
# Separate panels for the two word classes, each with one regression line per
# group. All panels share the same axis limits so they can be compared
# directly:

p = plot.Scatter('RT', 'Frequency', 'NativeLanguage', facet='Class', smooth='lm', data=ds, alpha=.3, size=8)

###############################################################################
# Mixed-effects regression
# ^^^^^^^^^^^^^^^^^^^^^^^^
# Participants and words are both random samples, so the model includes
# random intercepts for both:

result = lmm('RT ~ Frequency * NativeLanguage', ['Subject', 'Word'], ds)
print(result)

###############################################################################
# The fixed effects estimates with 95% confidence intervals:

p = plot.Coefficients(result)

###############################################################################
# Model predictions can be plotted like any other variable. Adding the fitted
# values to the dataset shows what the model thinks the data look like:

result.add_to(ds)
p = plot.Scatter('fitted', 'Frequency', 'NativeLanguage', smooth='lm', data=ds, alpha=.3, size=8)
