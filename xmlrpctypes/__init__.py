from xmlrpctypes.core import *
from xmlrpctypes.scalars import *
from xmlrpctypes.composite import *
from xmlrpctypes.registry import *
from xmlrpctypes.protocol import *

__version__ = '0.1.0'
