"""
Parameter records and the parameter set for the PeTS model.

Records are what is read from parameter files (one PureRecord per substance, and optionally one k_ij per pair of
substances). A PetsParameters is built once from the records, and holds the per-component parameters together with the
combining-rule matrices used by all the contributions. Every array on a PetsParameters is read-only, so a parameter set
can be shared between models (and threads) without copying.
"""
import copy
import json
import numpy as np
from collections.abc import Iterable

VISCOSITY_COEFFS = 4
DIFFUSION_COEFFS = 5
THERMAL_CONDUCTIVITY_COEFFS = 4


def _frozen(arr):
    arr = np.array(arr, dtype=float)
    arr.flags.writeable = False
    return arr


def _coefficients(coeffs, ncoeffs, name):
    if coeffs is None:
        return None
    coeffs = tuple(float(c) for c in coeffs)
    if len(coeffs) != ncoeffs:
        raise ValueError(f'{name} requires {ncoeffs} coefficients, got {len(coeffs)}.')
    return coeffs


class PetsRecord:
    """
    Pure component PeTS parameters.
    """

    def __init__(self, sigma, epsilon_k, viscosity=None, diffusion=None, thermal_conductivity=None):
        """
        Args:
            sigma (float) : Segment diameter [Å]
            epsilon_k (float) : Energy parameter divided by Boltzmanns constant [K]
            viscosity (list[float], optional) : Four entropy scaling coefficients for viscosity
            diffusion (list[float], optional) : Five entropy scaling coefficients for self-diffusion
            thermal_conductivity (list[float], optional) : Four entropy scaling coefficients for thermal conductivity

        Raises:
            ValueError : If a coefficient list has the wrong length.
        """
        self.sigma = float(sigma)
        self.epsilon_k = float(epsilon_k)
        self.viscosity = _coefficients(viscosity, VISCOSITY_COEFFS, 'viscosity')
        self.diffusion = _coefficients(diffusion, DIFFUSION_COEFFS, 'diffusion')
        self.thermal_conductivity = _coefficients(thermal_conductivity, THERMAL_CONDUCTIVITY_COEFFS,
                                                  'thermal_conductivity')

    def __repr__(self):
        ostr = f'PetsRecord(sigma={self.sigma}, epsilon_k={self.epsilon_k}'
        for key in ('viscosity', 'diffusion', 'thermal_conductivity'):
            coeffs = getattr(self, key)
            if coeffs is not None:
                ostr += f', {key}={list(coeffs)}'
        return ostr + ')'

    def __eq__(self, other):
        if not isinstance(other, PetsRecord):
            return False
        return self.to_dict() == other.to_dict()

    def to_dict(self):
        d = {'sigma': self.sigma, 'epsilon_k': self.epsilon_k}
        for key in ('viscosity', 'diffusion', 'thermal_conductivity'):
            coeffs = getattr(self, key)
            if coeffs is not None:
                d[key] = list(coeffs)
        return d

    @staticmethod
    def from_dict(d):
        return PetsRecord(d['sigma'], d['epsilon_k'], viscosity=d.get('viscosity'), diffusion=d.get('diffusion'),
                          thermal_conductivity=d.get('thermal_conductivity'))


class Identifier:
    """
    Identifies a substance. Any of the fields may be used to look up substances in a parameter file.
    """
    FIELDS = ('cas', 'name', 'iupac_name', 'smiles', 'inchi', 'formula')

    def __init__(self, cas=None, name=None, iupac_name=None, smiles=None, inchi=None, formula=None):
        self.cas = cas
        self.name = name
        self.iupac_name = iupac_name
        self.smiles = smiles
        self.inchi = inchi
        self.formula = formula

    def __repr__(self):
        fields = ', '.join(f'{f}={getattr(self, f)}' for f in self.FIELDS if getattr(self, f) is not None)
        return f'Identifier({fields})'

    def __eq__(self, other):
        if not isinstance(other, Identifier):
            return False
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(tuple(getattr(self, f) for f in self.FIELDS))

    def to_dict(self):
        return {f: getattr(self, f) for f in self.FIELDS if getattr(self, f) is not None}

    @staticmethod
    def from_dict(d):
        return Identifier(**{f: d.get(f) for f in Identifier.FIELDS})


class PureRecord:
    """
    Everything needed to describe one substance: the identifier, the molar weight, the PeTS model record and
    (optionally) a record for an external ideal gas model, which is passed through untouched.
    """

    def __init__(self, identifier, molarweight, model_record, ideal_gas_record=None):
        """
        Args:
            identifier (Identifier) : The substance identifier
            molarweight (float) : Molar weight [g / mol]
            model_record (PetsRecord) : PeTS parameters
            ideal_gas_record (any, optional) : Record for an external ideal gas model
        """
        self.identifier = identifier
        self.molarweight = float(molarweight)
        self.model_record = model_record
        self.ideal_gas_record = ideal_gas_record

    def __repr__(self):
        ostr = f'PureRecord(\n\tidentifier={self.identifier},\n\tmolarweight={self.molarweight},\n' \
               f'\tmodel_record={self.model_record}'
        if self.ideal_gas_record is not None:
            ostr += f',\n\tideal_gas_record={self.ideal_gas_record}'
        return ostr + ',\n)'

    def to_dict(self):
        d = {'identifier': self.identifier.to_dict(), 'model_record': self.model_record.to_dict(),
             'molarweight': self.molarweight}
        if self.ideal_gas_record is not None:
            d['ideal_gas_record'] = self.ideal_gas_record
        return d

    def to_json_str(self):
        return json.dumps(self.to_dict())

    @staticmethod
    def from_dict(d):
        return PureRecord(Identifier.from_dict(d['identifier']), d['molarweight'],
                          PetsRecord.from_dict(d['model_record']), ideal_gas_record=d.get('ideal_gas_record'))

    @staticmethod
    def from_json_str(json_str):
        """
        Args:
            json_str (str) : A single record, formatted as {"identifier": {...}, "model_record": {...}, "molarweight": ...}
        Returns:
            PureRecord : The record
        """
        return PureRecord.from_dict(json.loads(json_str))


class PetsBinaryRecord:
    """
    Binary interaction parameter for one (ordered) pair of substances.
    """

    def __init__(self, k_ij=0.):
        self.k_ij = float(k_ij)

    def __repr__(self):
        return f'PetsBinaryRecord(k_ij={self.k_ij})'

    def __float__(self):
        return self.k_ij


class PetsParameters:
    """
    PeTS parameter set for one or more components. Built once from records, never modified afterwards.

    Combining rules:
        sigma_ij = (sigma_i + sigma_j) / 2
        e_k_ij = sqrt(epsilon_k_i * epsilon_k_j)
        epsilon_k_ij = (1 - k_ij) * e_k_ij

    Note: k_ij is used exactly as supplied, it is *not* symmetrised. An asymmetric binary matrix gives an asymmetric
    epsilon_k_ij.
    """

    def __init__(self, pure_records, binary_records=None):
        """
        Args:
            pure_records (list[PureRecord]) : One record per component
            binary_records (2d array of float or PetsBinaryRecord, optional) : Binary interaction matrix, indexed as
                            k_ij[<comp idx>][<comp idx>]. Defaults to zeros.

        Raises:
            ValueError : If the binary interaction matrix does not have shape (ncomps, ncomps).
        """
        self.pure_records = list(pure_records)
        self.ncomps = ncomps = len(self.pure_records)

        if binary_records is None:
            binary_records = [[PetsBinaryRecord() for _ in range(ncomps)] for _ in range(ncomps)]
        else:
            if np.shape(binary_records) != (ncomps, ncomps):
                raise ValueError(f'Binary interaction matrix must have shape ({ncomps}, {ncomps}), '
                                 f'but had shape {np.shape(binary_records)}.')
            binary_records = [[br if isinstance(br, PetsBinaryRecord) else PetsBinaryRecord(br) for br in row]
                              for row in binary_records]
        self.binary_records = binary_records

        self.molarweight = _frozen([r.molarweight for r in self.pure_records])
        self.sigma = _frozen([r.model_record.sigma for r in self.pure_records])
        self.epsilon_k = _frozen([r.model_record.epsilon_k for r in self.pure_records])
        self.k_ij = _frozen([[float(br) for br in row] for row in self.binary_records]).reshape((ncomps, ncomps))

        sigma_ij = np.empty((ncomps, ncomps))
        e_k_ij = np.empty((ncomps, ncomps))
        epsilon_k_ij = np.empty((ncomps, ncomps))
        for i in range(ncomps):
            for j in range(ncomps):
                sigma_ij[i][j] = 0.5 * (self.sigma[i] + self.sigma[j])
                e_k_ij[i][j] = np.sqrt(self.epsilon_k[i] * self.epsilon_k[j])
                epsilon_k_ij[i][j] = (1 - self.k_ij[i][j]) * e_k_ij[i][j]

        self.sigma_ij = _frozen(sigma_ij)
        self.e_k_ij = _frozen(e_k_ij)
        self.epsilon_k_ij = _frozen(epsilon_k_ij)

        self.viscosity = self._coefficient_matrix('viscosity', VISCOSITY_COEFFS)
        self.diffusion = self._coefficient_matrix('diffusion', DIFFUSION_COEFFS)
        self.thermal_conductivity = self._coefficient_matrix('thermal_conductivity', THERMAL_CONDUCTIVITY_COEFFS)

        ideal_gas_records = [r.ideal_gas_record for r in self.pure_records]
        self.ideal_gas_records = None if any(r is None for r in ideal_gas_records) else ideal_gas_records

    def _coefficient_matrix(self, key, ncoeffs):
        """Internal
        Entropy scaling coefficients, indexed as coeffs[<coeff idx>][<comp idx>]. All-or-nothing: returns None
        if any of the components lacks the coefficients.
        """
        coeffs = [getattr(r.model_record, key) for r in self.pure_records]
        if any(c is None for c in coeffs):
            return None
        return _frozen(np.array(coeffs, dtype=float).reshape((self.ncomps, ncoeffs)).T)

    @staticmethod
    def new_pure(pure_record):
        """Constructor
        Parameters for a single substance.

        Args:
            pure_record (PureRecord) : The substance
        """
        return PetsParameters([pure_record])

    @staticmethod
    def new_binary(pure_records, binary_record=None):
        """Constructor
        Parameters for a binary mixture.

        Args:
            pure_records (list[PureRecord]) : Exactly two records
            binary_record (float or PetsBinaryRecord, optional) : The k_ij, used for both off-diagonal entries.

        Raises:
            ValueError : If not exactly two records are given.
        """
        if len(pure_records) != 2:
            raise ValueError(f'A binary mixture needs two pure records, got {len(pure_records)}.')
        if binary_record is None:
            return PetsParameters(pure_records)
        k_ij = float(binary_record)
        return PetsParameters(pure_records, [[0., k_ij], [k_ij, 0.]])

    @staticmethod
    def from_lists(sigma, epsilon_k, k_ij=None, molarweight=None, viscosity=None, diffusion=None,
                   thermal_conductivity=None):
        """Constructor
        Create a parameter set from lists of parameters. The components are given the names '0', '1', ...

        Args:
            sigma (list[float]) : Segment diameters [Å]
            epsilon_k (list[float]) : Energy parameters [K]
            k_ij (2d array, optional) : Binary interaction parameters
            molarweight (list[float], optional) : Molar weights [g / mol], defaults to 1.
            viscosity (list[list[float]], optional) : Entropy scaling coefficients for viscosity
            diffusion (list[list[float]], optional) : Entropy scaling coefficients for self-diffusion
            thermal_conductivity (list[list[float]], optional) : Entropy scaling coefficients for thermal conductivity
        """
        if not isinstance(sigma, Iterable):
            sigma, epsilon_k = [sigma], [epsilon_k]
        ncomps = len(sigma)
        if molarweight is None:
            molarweight = np.ones(ncomps)

        pure_records = []
        for i in range(ncomps):
            model_record = PetsRecord(sigma[i], epsilon_k[i],
                                      viscosity=None if viscosity is None else viscosity[i],
                                      diffusion=None if diffusion is None else diffusion[i],
                                      thermal_conductivity=None if thermal_conductivity is None
                                      else thermal_conductivity[i])
            pure_records.append(PureRecord(Identifier(name=str(i)), molarweight[i], model_record))
        return PetsParameters(pure_records, k_ij)

    @staticmethod
    def from_json(substances, pure_path, binary_path=None, search_option='name'):
        """Constructor
        Read parameters from json files.

        Args:
            substances (list[str]) : Identifiers of the substances to use
            pure_path (str) : Path to file with a list of pure records
            binary_path (str, optional) : Path to file with a list of binary records, formatted as
                                {"id1": {identifier}, "id2": {identifier}, "model_record": {"k_ij": float}}
            search_option (str) : Identifier field to search by ('cas', 'name', 'iupac_name', 'smiles', 'inchi' or
                                'formula'). Defaults to 'name'.

        Raises:
            KeyError : If a substance is not found, or `search_option` is not an identifier field.
        """
        if search_option not in Identifier.FIELDS:
            raise KeyError(f"Invalid search option '{search_option}', valid options are {Identifier.FIELDS}.")

        with open(pure_path, 'r') as file:
            records = [PureRecord.from_dict(d) for d in json.load(file)]
        lookup = {getattr(r.identifier, search_option): r for r in records}
        try:
            pure_records = [lookup[s] for s in substances]
        except KeyError as err:
            raise KeyError(f'Substance {err} not found in {pure_path} (searched by {search_option}).') from err

        if binary_path is None:
            return PetsParameters(pure_records)

        with open(binary_path, 'r') as file:
            binary_data = json.load(file)
        k_ij = np.zeros((len(substances), len(substances)))
        index = {s: i for i, s in enumerate(substances)}
        for br in binary_data:
            id1 = br['id1'].get(search_option)
            id2 = br['id2'].get(search_option)
            if (id1 not in index) or (id2 not in index):
                continue
            model_record = br['model_record']
            k = model_record['k_ij'] if isinstance(model_record, dict) else model_record
            k_ij[index[id1]][index[id2]] = k
            k_ij[index[id2]][index[id1]] = k
        return PetsParameters(pure_records, k_ij)

    def subset(self, component_list):
        """Utility
        Create a new parameter set, containing only the components in `component_list`. The new parameter set is built
        from (copies of) the records, and shares nothing with this one.

        Args:
            component_list (list[int]) : Component indices to keep (zero-indexed)
        Returns:
            PetsParameters : The new parameter set
        """
        pure_records = [copy.deepcopy(self.pure_records[i]) for i in component_list]
        binary_records = [[copy.deepcopy(self.binary_records[i][j]) for j in component_list] for i in component_list]
        return PetsParameters(pure_records, binary_records)

    def component_names(self):
        return [r.identifier.name if r.identifier.name is not None else f'Component {i + 1}'
                for i, r in enumerate(self.pure_records)]

    def to_markdown(self):
        """Utility
        Returns:
            str : Table of the parameters in markdown format
        """
        ostr = '|component|molarweight|$\\sigma$|$\\varepsilon$|\n|-|-|-|-|'
        for i, name in enumerate(self.component_names()):
            ostr += f'\n|{name}|{self.molarweight[i]}|{self.sigma[i]}|{self.epsilon_k[i]}|'
        return ostr

    _repr_markdown_ = to_markdown

    def __repr__(self):
        ostr = f'PetsParameters(\n\tmolarweight={self.molarweight}\n\tsigma={self.sigma}\n\tepsilon_k={self.epsilon_k}'
        if np.any(self.k_ij != 0):
            ostr += f'\n\tk_ij=\n{self.k_ij}'
        return ostr + '\n)'
