"""The ``lexdec`` lexical decision data.

The original data set (Baayen, 2008, *Analyzing Linguistic Data*) contains
lexical decision latencies for 79 English nouns (names of animals and plants)
from 21 subjects, some of them native speakers of English. :func:`get_lexdec`
simulates data with the same structure, :func:`load_lexdec` loads the real
table exported from R.
"""
import logging

import numpy as np

from .._data_obj import Dataset, Factor, Var
from .._exceptions import KeysMissing
from .._io.txt import tsv
from .._types import PathArg


LEXDEC_COLUMNS = {
    'Subject': "Subject identifier",
    'RT': "Log reaction time",
    'Trial': "Rank of the trial in the experimental list",
    'Sex': "Sex of the subject (F, M)",
    'NativeLanguage': "Native language of the subject (English, Other)",
    'Correct': "Whether the response was correct (correct, incorrect)",
    'PrevType': "Lexical status of the preceding stimulus (word, nonword)",
    'Word': "The word presented",
    'Frequency': "Log word frequency",
    'FamilySize': "Log morphological family size",
    'Length': "Word length in letters",
    'Class': "Semantic class of the word (animal, plant)",
    'Complex': "Morphological complexity of the word (simplex, complex)",
}
CATEGORIAL_COLUMNS = ('Subject', 'Sex', 'NativeLanguage', 'Correct', 'PrevType', 'Word', 'Class', 'Complex')
# (word, class, complex)
WORDS = [
    ('owl', 'animal', False), ('mole', 'animal', False), ('cherry', 'plant', False),
    ('pear', 'plant', False), ('dog', 'animal', False), ('blackberry', 'plant', True),
    ('squirrel', 'animal', False), ('apple', 'plant', False), ('kiwi', 'plant', False),
    ('bee', 'animal', False), ('vulture', 'animal', False), ('beaver', 'animal', False),
    ('fox', 'animal', False), ('potato', 'plant', False), ('tomato', 'plant', False),
    ('cat', 'animal', False), ('lion', 'animal', False), ('carrot', 'plant', False),
    ('ant', 'animal', False), ('eagle', 'animal', False), ('lemon', 'plant', False),
    ('bat', 'animal', False), ('goat', 'animal', False), ('whale', 'animal', False),
    ('mushroom', 'plant', True), ('paprika', 'plant', False), ('stork', 'animal', False),
    ('horse', 'animal', False), ('melon', 'plant', False), ('pig', 'animal', False),
    ('swan', 'animal', False), ('crocodile', 'animal', False), ('chicken', 'animal', False),
    ('banana', 'plant', False), ('mouse', 'animal', False), ('pineapple', 'plant', True),
    ('donkey', 'animal', False), ('walnut', 'plant', True), ('olive', 'plant', False),
    ('butterfly', 'animal', True), ('snake', 'animal', False), ('shark', 'animal', False),
    ('tortoise', 'animal', False), ('leek', 'plant', False), ('frog', 'animal', False),
    ('bear', 'animal', False), ('goose', 'animal', False), ('woodpecker', 'animal', True),
    ('grape', 'plant', False), ('cucumber', 'plant', False), ('hedgehog', 'animal', True),
    ('moose', 'animal', False), ('camel', 'animal', False), ('avocado', 'plant', False),
    ('monkey', 'animal', False), ('gull', 'animal', False), ('radish', 'plant', False),
    ('orange', 'plant', False), ('peanut', 'plant', True), ('asparagus', 'plant', False),
    ('magpie', 'animal', True), ('broccoli', 'plant', False), ('bunny', 'animal', False),
    ('spider', 'animal', False), ('strawberry', 'plant', True), ('mustard', 'plant', False),
    ('wasp', 'animal', False), ('lettuce', 'plant', False), ('dolphin', 'animal', False),
    ('reindeer', 'animal', True), ('clove', 'plant', False), ('sheep', 'animal', False),
    ('almond', 'plant', False), ('beetroot', 'plant', True), ('tiger', 'animal', False),
    ('squid', 'animal', False), ('gherkin', 'plant', False), ('penguin', 'animal', False),
    ('vole', 'animal', False),
]


def get_lexdec(
        seed: int = 0,
        n_subjects: int = 21,
        n_words: int = 79,
) -> Dataset:
    """Simulated lexical decision data with the structure of ``lexdec``

    Parameters
    ----------
    seed
        Seed for the random state (``None`` to use the global random state).
    n_subjects
        Number of subjects (at least 2; half are native speakers of English).
    n_words
        Number of words (at least 4). Beyond the 79 animal and plant names of
        the original list, words are named ``w080``, ``w081``, ...

    Returns
    -------
    lexdec
        One case per subject and word, sorted by subject and trial. ``RT`` is
        the log reaction time in ms and depends on word frequency, native
        language, their interaction, subject and word intercepts, trial
        order, the preceding stimulus and response accuracy.

    See Also
    --------
    load_lexdec : load the real data
    """
    if n_subjects < 2:
        raise ValueError(f"{n_subjects=}: need at least 2 subjects")
    elif n_words < 4:
        raise ValueError(f"{n_words=}: need at least 4 words")
    random = np.random if seed is None else np.random.RandomState(seed)

    # subjects
    subjects = [f'S{i:02}' for i in range(1, n_subjects + 1)]
    n_native = (n_subjects + 1) // 2
    native = random.permutation(['English'] * n_native + ['Other'] * (n_subjects - n_native))
    sex = random.choice(['F', 'M'], n_subjects, p=[.6, .4])
    subject_intercept = random.normal(0, .12, n_subjects)

    # words
    words = WORDS[:n_words]
    words += [(f'w{i:03}', 'animal' if i % 2 else 'plant', False) for i in range(len(words) + 1, n_words + 1)]
    word_names = [w for w, _, _ in words]
    word_class = [c for _, c, _ in words]
    word_complex = ['complex' if c else 'simplex' for _, _, c in words]
    length = np.array([len(w) for w in word_names])
    frequency = np.clip(7. - .3 * length + random.normal(0, 1., n_words), .5, 8)
    family_size = np.clip(.35 * frequency + random.normal(0, .5, n_words), 0, None)
    word_intercept = random.normal(0, .06, n_words)

    # trials
    rows = []
    for i_subject in range(n_subjects):
        order = random.permutation(n_words)
        trials = np.sort(random.choice(np.arange(23, 23 + 2 * n_words), n_words, replace=False))
        for trial, i_word in zip(trials, order):
            rows.append((i_subject, i_word, trial))
    i_subject, i_word, trial = map(np.array, zip(*rows))
    n = len(rows)
    is_other = native[i_subject] == 'Other'
    freq = frequency[i_word]
    prev_nonword = random.rand(n) < .5
    p_error = 1 / (1 + np.exp(3.5 + .3 * freq - .8 * is_other))
    incorrect = random.rand(n) < p_error
    rt = (6.5
          - .03 * freq
          + .3 * is_other
          - .03 * freq * is_other
          + subject_intercept[i_subject]
          + word_intercept[i_word]
          - .0004 * trial
          + .03 * prev_nonword
          + .06 * incorrect
          + random.normal(0, .15, n))

    ds = Dataset(name='lexdec', info={'columns': LEXDEC_COLUMNS})
    ds['Subject'] = Factor(np.take(subjects, i_subject), random=True)
    ds['RT'] = Var(rt)
    ds['Trial'] = Var(trial)
    ds['Sex'] = Factor(sex[i_subject])
    ds['NativeLanguage'] = Factor(native[i_subject])
    ds['Correct'] = Factor(np.where(incorrect, 'incorrect', 'correct'), labels={'correct': 'correct', 'incorrect': 'incorrect'})
    ds['PrevType'] = Factor(np.where(prev_nonword, 'nonword', 'word'), labels={'word': 'word', 'nonword': 'nonword'})
    ds['Word'] = Factor(np.take(word_names, i_word), random=True)
    ds['Frequency'] = Var(freq)
    ds['FamilySize'] = Var(family_size[i_word])
    ds['Length'] = Var(length[i_word])
    ds['Class'] = Factor(np.take(word_class, i_word))
    ds['Complex'] = Factor(np.take(word_complex, i_word), labels={'simplex': 'simplex', 'complex': 'complex'})
    return ds


def load_lexdec(path: PathArg) -> Dataset:
    """Load the ``lexdec`` data exported from R

    Parameters
    ----------
    path
        Table written with, e.g., ``write.csv(lexdec, 'lexdec.csv')`` after
        ``library(languageR)``. Tab-separated files are read unless the file
        name ends in ``.csv``.

    Returns
    -------
    lexdec
        The table, with ``Subject`` and ``Word`` as random factors. Columns in
        addition to the ones described in :data:`LEXDEC_COLUMNS` are kept.
    """
    logger = logging.getLogger('lingplot')
    ds = tsv(path, types={key: 'f' for key in CATEGORIAL_COLUMNS}, random=('Subject', 'Word'))
    if 'row' in ds:
        del ds['row']
    missing = [key for key in LEXDEC_COLUMNS if key not in ds]
    if missing:
        raise KeysMissing(missing, 'path', str(path))
    ds.name = 'lexdec'
    ds.info['columns'] = LEXDEC_COLUMNS
    logger.info("Loaded lexdec from %s (%i trials)", path, ds.n_cases)
    return ds


def lexdec_info(column: str = None):
    """Description of the ``lexdec`` columns

    Parameters
    ----------
    column
        Name of a column (default: return all descriptions as dict).
    """
    if column is None:
        return dict(LEXDEC_COLUMNS)
    return LEXDEC_COLUMNS[column]
