from . import kernel
from . import grid
from . import profile
from . import parameters
from . import pets

Grid = grid.Grid
PlanarGrid = grid.PlanarGrid
SphericalGrid = grid.SphericalGrid
Geometry = grid.Geometry
Profile = profile.Profile
PetsParameters = parameters.PetsParameters
PetsRecord = parameters.PetsRecord
PureRecord = parameters.PureRecord
Identifier = parameters.Identifier
PetsBinaryRecord = parameters.PetsBinaryRecord
FMTVersion = pets.FMTVersion
PetsOptions = pets.PetsOptions
Pets = pets.Pets
PetsFunctional = pets.PetsFunctional
