import pytest

from javacpp_build._impl.build.args import ArgsNamespace
from javacpp_build._impl.support.options import get_opts, set_opts


@pytest.fixture(autouse=True)
def _fixed_platform():
    # Tests must not depend on the machine they run on
    saved = ArgsNamespace(**vars(get_opts()))
    set_opts(ArgsNamespace(platform="linux-x86_64"))
    yield
    set_opts(saved)
