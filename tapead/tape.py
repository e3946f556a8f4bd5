import logging

from . import operator
from .backend import get_backend
from .error import DuplicatedName, ForeignNode
from .node import Node

logger = logging.getLogger("TapeAD")
_logging_handler = logging.StreamHandler()
logger.addHandler(_logging_handler)

class Record(object):
    """ A record on the tape.

        A record contains the names of the input nodes, the name of the
        output node and the backward function of the application.

        backward(tape, _y) returns one gradient node per input.
    """
    def __init__(self, operator, inputs, output, backward):
        self.operator = operator
        self.inputs = inputs
        self.output = output
        self.backward = backward

    def __repr__(self):
        return '%s / %s -> %s' % (self.operator, self.inputs, self.output)

class Tape(object):
    """ An append-only log of operations; a Wengert list.

        The tape allocates the nodes and records every operation applied to
        them. Records are appended in the order of execution, therefore the
        log is always topologically ordered and :meth:`grad` only needs to
        walk it backwards.

        The tape is never truncated implicitly. Gradients computed by
        :meth:`grad` are recorded on the same tape, which is what makes
        higher order derivatives possible.

        Parameters
        ----------
        backend : str or Backend
            'scalar' (default), 'numpy' or a Backend instance.
        prefix : str
            prefix of the generated names of anonymous nodes.

    """
    def __init__(self, backend=None, prefix='v'):
        self.backend = get_backend(backend)
        self.prefix = prefix
        self.records = []
        self.names = set()
        self._counter = 0

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def __repr__(self):
        return '\n'.join('%s' % record for record in self.records)

    def _unique_name(self):
        while True:
            name = '%s%d' % (self.prefix, self._counter)
            self._counter = self._counter + 1
            # a named leaf may have taken the name already.
            if name not in self.names:
                return name

    def _define(self, value, name):
        if name is None:
            name = self._unique_name()
        elif name in self.names:
            raise DuplicatedName("node `%s` is already defined on the tape" % name)

        self.names.add(name)
        return Node(self, self.backend.prepare(value), name)

    def _check_owner(self, node):
        if not isinstance(node, Node):
            raise TypeError("expecting a Node, got %s" % repr(type(node)))

        if node.tape is not self:
            raise ForeignNode("node `%s` does not belong to this tape" % node.name)

    def var(self, value):
        """ create an anonymous leaf node; nothing is recorded """
        return self._define(value, None)

    def named_var(self, value, name):
        """ create a named leaf node; nothing is recorded """
        node = self._define(value, name)
        logger.info("%s = %s", node.name, node)
        return node

    def apply(self, op, inputs, name=None):
        """ apply an operator to the input nodes, and record it on the tape.

            The value is computed eagerly; if the backend fails, the exception
            propagates and nothing is recorded.
        """
        if len(inputs) != len(op.ain):
            raise TypeError("%s expects %d inputs, got %d" % (op, len(op.ain), len(inputs)))

        for node in inputs:
            self._check_owner(node)

        value = op.apl(self.backend, *[node.value for node in inputs])

        y = self._define(value, name)

        def backward(tape, _y):
            return op.vjp(tape, _y, *inputs)

        self.records.append(Record(op, tuple(node.name for node in inputs), y.name, backward))

        if logger.isEnabledFor(logging.INFO):
            logger.info(op.format(y, inputs))
        return y

    def add(self, a, b, name=None):
        return self.apply(operator.add(), (a, b), name=name)

    def mul(self, a, b, name=None):
        return self.apply(operator.mul(), (a, b), name=name)

    def sum(self, a, name=None, shape=()):
        """ sum of a; reduces to a scalar unless a shape is given. """
        return self.apply(operator.sum(shape=tuple(shape)), (a,), name=name)

    def expand(self, a, shape, name=None):
        """ broadcast a to shape. """
        return self.apply(operator.expand(shape=tuple(shape)), (a,), name=name)

    def grad(self, output, wanted):
        """ Reverse pass from output.

            The gradient of output with respect to every node in wanted is
            stored in the gradient slot of the node; nodes that do not
            contribute to output receive None.

            Only the records present when grad is called are visited; records
            appended by the backward functions during the pass are not.

            Returns
            -------
            the gradients, in the order of wanted; a single gradient if
            wanted is a single node.
        """
        if isinstance(wanted, Node):
            wanted = [wanted]
            squeeze = True
        else:
            squeeze = False

        self._check_owner(output)
        for node in wanted:
            self._check_owner(node)

        logger.debug("d%s --------------", output.name)

        partials = {}
        partials[output.name] = self.var(self.backend.ones_like(output.value))

        # backward functions append to self.records while we walk.
        records = list(self.records)

        for record in records[::-1]:
            logger.debug("%s -> %s", record.inputs, record.output)

            _y = partials.get(record.output)
            if _y is None: continue

            gradients = record.backward(self, _y)

            for name, _x in zip(record.inputs, gradients):
                if name in partials:
                    partials[name] = self.add(partials[name], _x)
                else:
                    partials[name] = _x

        for name, _x in partials.items():
            logger.debug("d%s_d%s = %s", output.name, name, _x.name)

        logger.debug("------------------")

        r = []
        for node in wanted:
            node._grad = partials.get(node.name)
            r.append(node._grad)

        if squeeze:
            r = r[0]
        return r

    def clear(self):
        """ Forget all records.

            Names remain allocated and the counter is not reset, such that
            nodes created after clear never collide with existing ones.
            Gradients of nodes computed before clear can no longer be
            differentiated through.
        """
        del self.records[:]

    def to_graph(self, **kwargs):
        """ Graph representation of the records, kwargs are sent to graphviz """
        import graphviz
        graph = graphviz.Digraph(**kwargs)

        defined = set()
        for i, record in enumerate(self.records):
            opid = '#%d' % i
            graph.node(opid, label=str(record.operator), shape='box')
            for argname, name in zip(record.operator.ain, record.inputs):
                if name not in defined:
                    graph.node(name, label=name)
                    defined.add(name)
                graph.edge(name, opid, headlabel=argname)

            if record.output not in defined:
                graph.node(record.output, label=record.output)
                defined.add(record.output)
            graph.edge(opid, record.output)

        return graph
