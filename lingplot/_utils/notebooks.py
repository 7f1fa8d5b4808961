import matplotlib


def use_inline_backend():
    "Whether figures are rendered inline (Jupyter) rather than in windows"
    # reading rcParams['backend'] directly would resolve the backend
    backend = dict.__getitem__(matplotlib.rcParams, 'backend')
    if not isinstance(backend, str):
        return False
    return backend.endswith('inline') or backend == 'nbAgg'


if use_inline_backend():
    from tqdm.auto import tqdm
else:
    from tqdm import tqdm
